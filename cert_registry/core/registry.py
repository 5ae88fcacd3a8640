import datetime
from functools import lru_cache
from typing import Callable

from cert_registry.access.services import AccessControl
from cert_registry.certificate.services import CertificateRegistry
from cert_registry.core.events import NotificationLog
from cert_registry.core.models.base import Principal, utc_datetime_now
from cert_registry.core.state import RegistryState
from cert_registry.logging_config import logger
from cert_registry.settings import settings


def deploy_registry(
    owner: Principal,
    clock: Callable[[], datetime.datetime] = utc_datetime_now,
) -> CertificateRegistry:
    """Create a fresh registry owned, and issuable, by `owner`."""
    logger.info(f"Deploying certificate registry owned by {owner}")

    state = RegistryState.create(owner)
    notifications = NotificationLog()
    access = AccessControl(state, notifications)

    return CertificateRegistry(state, notifications, access=access, clock=clock)


@lru_cache
def get_registry() -> CertificateRegistry:
    """The process-wide registry served by the API."""
    return deploy_registry(settings.REGISTRY_OWNER)
