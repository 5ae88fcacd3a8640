import datetime

from pydantic import BaseModel, Field

from cert_registry.certificate.models import CertificateRecord, CertificateSubject
from cert_registry.core.models.base import EPOCH, ZERO_PRINCIPAL


class CertificateIssue(CertificateSubject):
    certificate_id: str = Field(description="Unique identifier for the certificate")


class CertificateBulkIssue(BaseModel):
    """A batch of certificates issued as one transaction.

    `certificate_ids[i]` is the ID of `certificates[i]`; both lists must have the
    same length. Either every certificate in the batch is issued or none is.
    """

    certificate_ids: list[str]
    certificates: list[CertificateSubject]


class CertificateVerification(BaseModel):
    """The verification view of a certificate ID.

    Unknown IDs verify to zero values with `is_valid` set to False rather than
    an error.
    """

    name: str = ""
    roll_number: str = ""
    marks: int = 0
    issue_date: datetime.datetime = EPOCH
    issuer: str = ZERO_PRINCIPAL
    is_valid: bool = False

    @classmethod
    def from_record(cls, record: CertificateRecord | None) -> "CertificateVerification":
        if record is None:
            return cls()
        return cls(
            name=record.name,
            roll_number=record.roll_number,
            marks=record.marks,
            issue_date=record.issue_date,
            issuer=record.issuer,
            is_valid=record.exists,
        )

    def as_tuple(self) -> tuple[str, str, int, datetime.datetime, str, bool]:
        return (
            self.name,
            self.roll_number,
            self.marks,
            self.issue_date,
            self.issuer,
            self.is_valid,
        )


class CertificateHashRead(BaseModel):
    certificate_id: str
    certificate_hash: str


class CertificateExistsRead(BaseModel):
    certificate_id: str
    exists: bool


class CertificateImportResponse(BaseModel):
    message: str
    number_of_imported_certificates: int
    certificate_ids: list[str]
