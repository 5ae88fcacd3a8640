import datetime
from typing import Callable

import pandas as pd

from cert_registry.access.services import AccessControl
from cert_registry.access.validation import validate_issuer
from cert_registry.certificate.models import CertificateRecord, CertificateSubject
from cert_registry.certificate.schemas import CertificateVerification
from cert_registry.certificate.validation import (
    validate_bulk_issuance,
    validate_bulk_lengths,
    validate_certificate_issuance,
)
from cert_registry.core.events import NotificationLog
from cert_registry.core.models.base import (
    ZERO_HASH,
    EventTypes,
    Principal,
    utc_datetime_now,
)
from cert_registry.core.state import RegistryState
from cert_registry.logging_config import logger

IMPORT_COLUMNS = ["certificate_id", "name", "roll_number", "marks"]


class CertificateRegistry:
    """Issues and verifies certificates on top of an AccessControl instance.

    Every mutating call runs as one transaction on the registry state: all
    checks are made first, then every write, so a rejected call leaves no trace.
    """

    def __init__(
        self,
        state: RegistryState,
        notifications: NotificationLog,
        access: AccessControl | None = None,
        clock: Callable[[], datetime.datetime] = utc_datetime_now,
    ):
        self.state = state
        self.notifications = notifications
        self.access = access or AccessControl(state, notifications)
        self.clock = clock

    def issue_certificate(
        self, caller: Principal, certificate_id: str, subject: CertificateSubject
    ) -> CertificateRecord:
        """Issue a single certificate.

        Args:
            caller (Principal): The issuing principal
            certificate_id (str): The unique ID for the certificate
            subject (CertificateSubject): The certificate subject fields

        Returns:
            CertificateRecord: The committed record

        Raises:
            NotAuthorized: If the caller is not an authorized issuer.
            DuplicateId: If the ID has already been issued.
            DuplicateContent: If an identical subject has already been issued.
        """

        with self.state.transaction() as state:
            validate_issuer(state, caller)
            certificate_hash = validate_certificate_issuance(
                state, certificate_id, subject
            )

            record = self._commit(
                state, certificate_id, subject, certificate_hash, caller, self.clock()
            )
            events = self.notifications.append_events(
                [
                    (
                        EventTypes.CERTIFICATE_ISSUED,
                        {
                            "certificate_id": certificate_id,
                            "certificate_hash": certificate_hash,
                            "issuer": caller,
                        },
                    )
                ]
            )

        self.notifications.publish(events)

        logger.info(f"Certificate {certificate_id} issued by {caller}")
        return record

    def issue_certificates_bulk(
        self,
        caller: Principal,
        certificate_ids: list[str],
        subjects: list[CertificateSubject],
    ) -> list[CertificateRecord]:
        """Issue a batch of certificates as a single all-or-nothing transaction.

        One CertificateIssued event is emitted per certificate in input order,
        followed by a single CertificatesIssuedBulk event for the batch.

        Raises:
            LengthMismatch: If the ID and subject lists differ in length.
            NotAuthorized: If the caller is not an authorized issuer.
            DuplicateId: If any ID is already issued or repeated in the batch.
            DuplicateContent: If any subject is already issued or repeated in the batch.
        """

        validate_bulk_lengths(certificate_ids, subjects)

        with self.state.transaction() as state:
            validate_issuer(state, caller)
            certificate_hashes = validate_bulk_issuance(
                state, certificate_ids, subjects
            )

            issue_date = self.clock()
            records = [
                self._commit(
                    state, certificate_id, subject, certificate_hash, caller, issue_date
                )
                for certificate_id, subject, certificate_hash in zip(
                    certificate_ids, subjects, certificate_hashes
                )
            ]

            events = [
                (
                    EventTypes.CERTIFICATE_ISSUED,
                    {
                        "certificate_id": record.certificate_id,
                        "certificate_hash": record.certificate_hash,
                        "issuer": caller,
                    },
                )
                for record in records
            ]
            events.append(
                (
                    EventTypes.CERTIFICATES_ISSUED_BULK,
                    {
                        "certificate_ids": list(certificate_ids),
                        "certificate_hashes": certificate_hashes,
                        "issuer": caller,
                    },
                )
            )
            created = self.notifications.append_events(events)

        self.notifications.publish(created)

        logger.info(f"{len(records)} certificates issued in bulk by {caller}")
        return records

    def certificate_exists(self, certificate_id: str) -> bool:
        record = self.state.certificates.get(certificate_id)
        return record is not None and record.exists

    def get_certificate(self, certificate_id: str) -> CertificateRecord | None:
        return self.state.certificates.get(certificate_id)

    def get_certificate_hash(self, certificate_id: str) -> str:
        """Return the stored fingerprint, or ZERO_HASH if the ID was never issued."""
        record = self.state.certificates.get(certificate_id)
        if record is None:
            return ZERO_HASH
        return record.certificate_hash

    def verify_certificate(self, certificate_id: str) -> CertificateVerification:
        return CertificateVerification.from_record(
            self.state.certificates.get(certificate_id)
        )

    @staticmethod
    def _commit(
        state: RegistryState,
        certificate_id: str,
        subject: CertificateSubject,
        certificate_hash: str,
        issuer: Principal,
        issue_date: datetime.datetime,
    ) -> CertificateRecord:
        record = CertificateRecord(
            certificate_id=certificate_id,
            name=subject.name,
            roll_number=subject.roll_number,
            marks=subject.marks,
            certificate_hash=certificate_hash,
            issuer=issuer,
            issue_date=issue_date,
        )
        state.certificates[certificate_id] = record
        state.used_hashes[certificate_hash] = certificate_id
        return record


def import_certificates(
    registry: CertificateRegistry, caller: Principal, certificate_df: pd.DataFrame
) -> list[CertificateRecord]:
    """Issue every row of an imported file as one bulk issuance.

    Args:
        registry (CertificateRegistry): The registry to issue into
        caller (Principal): The issuing principal
        certificate_df (pd.DataFrame): One row per certificate with the columns
            certificate_id, name, roll_number and marks

    Returns:
        list[CertificateRecord]: The committed records, in file order
    """

    missing = [col for col in IMPORT_COLUMNS if col not in certificate_df.columns]
    if missing:
        err_msg = f"Import file is missing required columns: {', '.join(missing)}"
        logger.error(err_msg)
        raise ValueError(err_msg)

    if certificate_df[IMPORT_COLUMNS].isnull().values.any():
        err_msg = "Import file contains empty values"
        logger.error(err_msg)
        raise ValueError(err_msg)

    certificate_ids = certificate_df["certificate_id"].astype(str).tolist()
    subjects = [
        CertificateSubject(
            name=str(row["name"]),
            roll_number=str(row["roll_number"]),
            marks=int(row["marks"]),
        )
        for row in certificate_df[IMPORT_COLUMNS].to_dict(orient="records")
    ]

    return registry.issue_certificates_bulk(caller, certificate_ids, subjects)
