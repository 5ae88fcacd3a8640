"""
Certificate Registry

A trust-anchored registry where authorized issuers register uniquely
identified certificates and anyone can verify them.
"""

from .access.services import AccessControl
from .certificate.models import CertificateRecord, CertificateSubject
from .certificate.schemas import CertificateVerification
from .certificate.services import CertificateRegistry
from .core.error_handling import (
    DuplicateContent,
    DuplicateId,
    LengthMismatch,
    NotAuthorized,
    RegistryError,
    Unauthorized,
)
from .core.events import NotificationLog
from .core.registry import deploy_registry
from .core.services import create_certificate_hash
from .core.state import RegistryState

__version__ = "1.0.0"
__all__ = [
    "AccessControl",
    "CertificateRecord",
    "CertificateRegistry",
    "CertificateSubject",
    "CertificateVerification",
    "DuplicateContent",
    "DuplicateId",
    "LengthMismatch",
    "NotAuthorized",
    "NotificationLog",
    "RegistryError",
    "RegistryState",
    "Unauthorized",
    "create_certificate_hash",
    "deploy_registry",
]
