from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from cert_registry.authentication.services import get_current_principal
from cert_registry.certificate.models import CertificateRecord, CertificateSubject
from cert_registry.certificate.schemas import (
    CertificateBulkIssue,
    CertificateExistsRead,
    CertificateHashRead,
    CertificateImportResponse,
    CertificateIssue,
    CertificateVerification,
)
from cert_registry.core.models.base import Principal
from cert_registry.core.registry import get_registry
from cert_registry.logging_config import logger
from cert_registry.utils import parse_import_file

from . import services

# Router initialisation
router = APIRouter(tags=["Certificates"])


@router.post("/issue", response_model=CertificateRecord, status_code=201)
def issue_certificate(
    certificate: CertificateIssue,
    caller: Principal = Depends(get_current_principal),
    registry: services.CertificateRegistry = Depends(get_registry),
):
    """Issue a single certificate as the calling principal."""
    subject = CertificateSubject.model_validate(
        certificate.model_dump(exclude={"certificate_id"})
    )
    return registry.issue_certificate(caller, certificate.certificate_id, subject)


@router.post("/issue_bulk", response_model=list[CertificateRecord], status_code=201)
def issue_certificates_bulk(
    certificates: CertificateBulkIssue,
    caller: Principal = Depends(get_current_principal),
    registry: services.CertificateRegistry = Depends(get_registry),
):
    """Issue a batch of certificates. Either all of them are issued or none are."""
    return registry.issue_certificates_bulk(
        caller, certificates.certificate_ids, certificates.certificates
    )


@router.post("/import", response_model=CertificateImportResponse, status_code=201)
async def import_certificates(
    file: UploadFile = File(...),
    caller: Principal = Depends(get_current_principal),
    registry: services.CertificateRegistry = Depends(get_registry),
) -> CertificateImportResponse:
    """Issue every certificate in a CSV or JSON file as one bulk issuance.

    The file needs the columns `certificate_id`, `name`, `roll_number` and
    `marks`, one row per certificate. JSON files may be an array of objects or
    an object of column arrays.
    """
    contents = await file.read()

    try:
        certificate_df = parse_import_file(
            file.filename, contents.decode("utf-8"), dtype=str
        )
        records = services.import_certificates(registry, caller, certificate_df)
    except (ValueError, UnicodeDecodeError) as e:
        logger.error(f"Error importing certificates: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    return CertificateImportResponse(
        message="Certificates imported successfully.",
        number_of_imported_certificates=len(records),
        certificate_ids=[record.certificate_id for record in records],
    )


@router.get("/{certificate_id:path}/exists", response_model=CertificateExistsRead)
def certificate_exists(
    certificate_id: str,
    registry: services.CertificateRegistry = Depends(get_registry),
):
    return CertificateExistsRead(
        certificate_id=certificate_id,
        exists=registry.certificate_exists(certificate_id),
    )


@router.get("/{certificate_id:path}/hash", response_model=CertificateHashRead)
def get_certificate_hash(
    certificate_id: str,
    registry: services.CertificateRegistry = Depends(get_registry),
):
    """Return the stored fingerprint, or the all-zero hash for unknown IDs."""
    return CertificateHashRead(
        certificate_id=certificate_id,
        certificate_hash=registry.get_certificate_hash(certificate_id),
    )


@router.get("/{certificate_id:path}/verify", response_model=CertificateVerification)
def verify_certificate(
    certificate_id: str,
    registry: services.CertificateRegistry = Depends(get_registry),
):
    """Return the certificate details. Unknown IDs verify with `is_valid` False."""
    return registry.verify_certificate(certificate_id)
