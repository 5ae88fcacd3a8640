import datetime
import enum
from enum import Enum
from functools import partial
from typing import Any

from pydantic import BaseModel, Field

utc_datetime_now = partial(datetime.datetime.now, datetime.timezone.utc)

# Principals are opaque identities, compared exactly
Principal = str

ZERO_HASH = "0x" + "0" * 64
ZERO_PRINCIPAL = "0x" + "0" * 40
EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


class EventTypes(str, Enum):
    ISSUER_AUTHORIZED = "IssuerAuthorized"
    CERTIFICATE_ISSUED = "CertificateIssued"
    CERTIFICATES_ISSUED_BULK = "CertificatesIssuedBulk"


class Event(BaseModel):
    position: int
    event_type: EventTypes
    attributes: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime.datetime = Field(default_factory=utc_datetime_now)


class logging_levels(str, enum.Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingLevelRequest(BaseModel):
    level: logging_levels
