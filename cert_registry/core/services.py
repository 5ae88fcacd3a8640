from hashlib import sha256

from cert_registry.certificate.models import CertificateSubject


def create_certificate_hash(subject: CertificateSubject) -> str:
    """
    Return the content fingerprint of a certificate subject.

    A JSON model dump of the subject is used so that the string representation
    is stable regardless of how the subject was constructed; registry-assigned
    fields such as the issuer or issue date are never part of the fingerprint.

    Args:
        subject (CertificateSubject): The certificate subject fields

    Returns:
        str: The 0x-prefixed hex digest of the subject
    """

    subject_json = CertificateSubject(
        name=subject.name, roll_number=subject.roll_number, marks=subject.marks
    ).model_dump_json()
    return "0x" + sha256(subject_json.encode()).hexdigest()
