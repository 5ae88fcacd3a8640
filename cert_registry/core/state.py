import threading
from contextlib import contextmanager
from typing import Any, Iterator

from pydantic import BaseModel, Field, PrivateAttr

from cert_registry.certificate.models import CertificateRecord
from cert_registry.core.models.base import Principal


class RegistryState(BaseModel):
    """All registry data, owned by a single registry instance.

    Mutations only happen inside `transaction()`, which serialises writers so
    that each call validates and commits against one consistent snapshot.
    Readers never take the lock.
    """

    owner: Principal
    authorized_issuers: dict[Principal, bool] = Field(default_factory=dict)
    certificates: dict[str, CertificateRecord] = Field(default_factory=dict)
    used_hashes: dict[str, str] = Field(default_factory=dict)

    _lock: Any = PrivateAttr(default_factory=threading.RLock)

    @classmethod
    def create(cls, owner: Principal) -> "RegistryState":
        """Initial state at deployment: the owner is an authorized issuer."""
        return cls(owner=owner, authorized_issuers={owner: True})

    @contextmanager
    def transaction(self) -> Iterator["RegistryState"]:
        with self._lock:
            yield self
