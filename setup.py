"""
Setup script for Certificate Registry
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="certificate-registry",
    version="1.0.0",
    description="A registry where authorized issuers register certificates that anyone can verify",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["cert_registry.tests", "cert_registry.tests.*"]),
    package_data={"cert_registry": ["static/descriptions/*.md"]},
    include_package_data=True,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.4", "httpx>=0.25"],
    },
    entry_points={
        "console_scripts": [
            "cert-registry-deploy=cert_registry.deploy:main",
        ],
    },
)
