#!/usr/bin/env python
"""
Deploy a certificate registry and optionally seed it.

Usage:
  cert-registry-deploy [--owner PRINCIPAL] [--issuer PRINCIPAL ...] [--import-file PATH]

Arguments:
  --owner        Principal that owns the registry. Defaults to REGISTRY_OWNER.
  --issuer       Principal to authorize as an issuer. May be repeated.
  --import-file  CSV or JSON file of certificates to issue as the owner.
"""

import argparse
import sys
from pathlib import Path

from cert_registry.authentication.services import create_access_token
from cert_registry.certificate.services import CertificateRegistry, import_certificates
from cert_registry.core.error_handling import RegistryError
from cert_registry.core.registry import deploy_registry
from cert_registry.settings import settings
from cert_registry.utils import parse_import_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deploy a certificate registry")
    parser.add_argument("--owner", default=settings.REGISTRY_OWNER)
    parser.add_argument("--issuer", action="append", default=[], dest="issuers")
    parser.add_argument("--import-file", type=Path, default=None)
    return parser


def deploy(
    owner: str, issuers: list[str], import_file: Path | None = None
) -> CertificateRegistry:
    print("Deploying certificate registry...")
    registry = deploy_registry(owner)
    print(f"Certificate registry deployed, owner: {registry.access.owner}")

    for issuer in issuers:
        registry.access.authorize_issuer(owner, issuer)
        print(f"Authorized issuer: {issuer}")

    if import_file is not None:
        certificate_df = parse_import_file(
            import_file.name, import_file.read_text(encoding="utf-8"), dtype=str
        )
        records = import_certificates(registry, owner, certificate_df)
        print(f"Issued {len(records)} certificates from {import_file}")

    return registry


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        registry = deploy(args.owner, args.issuers, args.import_file)
    except (RegistryError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for principal in [registry.access.owner, *args.issuers]:
        print(f"Access token for {principal}: {create_access_token(principal)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
