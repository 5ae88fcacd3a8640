import datetime

from pydantic import BaseModel, ConfigDict, Field

from cert_registry.core.models.base import Principal


class CertificateSubject(BaseModel):
    """The attributes of the certificate holder that make up its content.

    The content fingerprint is derived from exactly these fields, so two
    certificates with identical subjects can never both be issued.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Full name of the certificate holder")
    roll_number: str = Field(description="Roll number of the certificate holder")
    marks: int = Field(ge=0, description="Marks awarded to the holder")


class CertificateRecord(CertificateSubject):
    """A certificate as committed to the registry. Records are never modified."""

    certificate_id: str = Field(description="Caller-chosen unique identifier")
    certificate_hash: str = Field(
        description="0x-prefixed SHA-256 fingerprint of the subject fields"
    )
    issuer: Principal = Field(description="Principal that issued the certificate")
    issue_date: datetime.datetime = Field(description="Time of issuance (UTC)")
    exists: bool = True
