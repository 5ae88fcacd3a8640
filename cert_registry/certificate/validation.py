from cert_registry.certificate.models import CertificateSubject
from cert_registry.core.error_handling import (
    DuplicateContent,
    DuplicateId,
    LengthMismatch,
)
from cert_registry.core.services import create_certificate_hash
from cert_registry.core.state import RegistryState
from cert_registry.logging_config import logger


def validate_certificate_id_unused(
    state: RegistryState, certificate_id: str, pending_ids: set[str] | None = None
):
    """Raise DuplicateId if the ID is already issued or pending in the same batch."""
    if certificate_id in state.certificates or (
        pending_ids is not None and certificate_id in pending_ids
    ):
        logger.warning(f"Certificate ID {certificate_id} already exists")
        raise DuplicateId(certificate_id=certificate_id)


def validate_certificate_hash_unused(
    state: RegistryState,
    certificate_hash: str,
    certificate_id: str,
    pending_hashes: set[str] | None = None,
):
    """Raise DuplicateContent if the fingerprint is already issued or pending."""
    if certificate_hash in state.used_hashes or (
        pending_hashes is not None and certificate_hash in pending_hashes
    ):
        logger.warning(
            f"Hash {certificate_hash} for {certificate_id} is already associated "
            "with another certificate"
        )
        raise DuplicateContent(
            certificate_id=certificate_id, certificate_hash=certificate_hash
        )


def validate_certificate_issuance(
    state: RegistryState, certificate_id: str, subject: CertificateSubject
) -> str:
    """
    Validate that a single certificate can be issued against the current state.

    Args:
        state (RegistryState): The registry state to validate against
        certificate_id (str): The ID requested for the certificate
        subject (CertificateSubject): The certificate subject fields

    Returns:
        str: The content fingerprint of the subject
    """

    validate_certificate_id_unused(state, certificate_id)
    certificate_hash = create_certificate_hash(subject)
    validate_certificate_hash_unused(state, certificate_hash, certificate_id)
    return certificate_hash


def validate_bulk_issuance(
    state: RegistryState,
    certificate_ids: list[str],
    subjects: list[CertificateSubject],
) -> list[str]:
    """
    Validate a whole batch before any of it is written.

    Each element is checked in input order against the committed state and
    against the elements before it in the same batch, so a batch that repeats
    an ID or a subject is rejected as a whole.

    Args:
        state (RegistryState): The registry state to validate against
        certificate_ids (list[str]): The requested IDs
        subjects (list[CertificateSubject]): The subjects, index-aligned with the IDs

    Returns:
        list[str]: The content fingerprints, index-aligned with the IDs
    """

    pending_ids: set[str] = set()
    pending_hashes: set[str] = set()
    certificate_hashes = []

    for certificate_id, subject in zip(certificate_ids, subjects):
        validate_certificate_id_unused(state, certificate_id, pending_ids)
        certificate_hash = create_certificate_hash(subject)
        validate_certificate_hash_unused(
            state, certificate_hash, certificate_id, pending_hashes
        )

        pending_ids.add(certificate_id)
        pending_hashes.add(certificate_hash)
        certificate_hashes.append(certificate_hash)

    return certificate_hashes


def validate_bulk_lengths(certificate_ids: list[str], subjects: list):
    if len(certificate_ids) != len(subjects):
        logger.warning(
            f"Bulk issuance with {len(certificate_ids)} IDs and {len(subjects)} certificates"
        )
        raise LengthMismatch(
            certificate_ids=len(certificate_ids), certificates=len(subjects)
        )
