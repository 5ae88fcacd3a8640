import datetime
from typing import Callable, Generator

import pytest
from dotenv import load_dotenv
from starlette.testclient import TestClient

from cert_registry.authentication.services import create_access_token
from cert_registry.certificate.models import CertificateSubject
from cert_registry.certificate.services import CertificateRegistry
from cert_registry.core.registry import deploy_registry, get_registry
from cert_registry.main import app

load_dotenv()

FIXED_ISSUE_DATE = datetime.datetime(2024, 6, 1, 12, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture()
def owner() -> str:
    return "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


@pytest.fixture()
def issuer() -> str:
    return "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


@pytest.fixture()
def outsider() -> str:
    return "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"


@pytest.fixture()
def registry(owner: str) -> CertificateRegistry:
    """A freshly deployed registry with a fixed clock."""
    return deploy_registry(owner, clock=lambda: FIXED_ISSUE_DATE)


@pytest.fixture()
def subject_factory() -> Callable[..., CertificateSubject]:
    """Factory for distinct certificate subjects."""

    def _create_subject(
        suffix: str = "", name: str = "Asha Verma", marks: int = 87
    ) -> CertificateSubject:
        return CertificateSubject(
            name=f"{name}{suffix}", roll_number=f"ROLL-{suffix or '0'}", marks=marks
        )

    return _create_subject


@pytest.fixture()
def api_client(registry: CertificateRegistry) -> Generator[TestClient, None, None]:
    """API Client for testing routes, served by the `registry` fixture."""

    def get_registry_override():
        return registry

    app.dependency_overrides[get_registry] = get_registry_override

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture()
def auth_factory() -> Callable[[str], dict[str, str]]:
    """Factory for bearer headers that identify the caller as a principal."""

    def _create_headers(principal: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(principal)}"}

    return _create_headers
