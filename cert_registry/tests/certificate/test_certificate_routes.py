import json

from starlette.testclient import TestClient

from cert_registry.certificate.models import CertificateSubject
from cert_registry.core.models.base import ZERO_HASH, ZERO_PRINCIPAL
from cert_registry.core.services import create_certificate_hash

CERTIFICATE = {
    "certificate_id": "CERT001",
    "name": "Asha Verma",
    "roll_number": "21CS017",
    "marks": 87,
}


def test_issue_and_verify_certificate(api_client: TestClient, auth_factory, owner: str):
    response = api_client.post(
        "/certificate/issue", json=CERTIFICATE, headers=auth_factory(owner)
    )

    assert response.status_code == 201
    record = response.json()
    expected_hash = create_certificate_hash(
        CertificateSubject(name="Asha Verma", roll_number="21CS017", marks=87)
    )
    assert record["certificate_hash"] == expected_hash
    assert record["issuer"] == owner
    assert record["exists"] is True

    response = api_client.get("/certificate/CERT001/exists")
    assert response.json() == {"certificate_id": "CERT001", "exists": True}

    response = api_client.get("/certificate/CERT001/hash")
    assert response.json() == {
        "certificate_id": "CERT001",
        "certificate_hash": expected_hash,
    }

    response = api_client.get("/certificate/CERT001/verify")
    verification = response.json()
    assert verification["name"] == "Asha Verma"
    assert verification["roll_number"] == "21CS017"
    assert verification["marks"] == 87
    assert verification["issuer"] == owner
    assert verification["is_valid"] is True


def test_read_missing_certificate(api_client: TestClient):
    response = api_client.get("/certificate/NON_EXISTENT_CERT/exists")
    assert response.status_code == 200
    assert response.json()["exists"] is False

    response = api_client.get("/certificate/NON_EXISTENT_CERT/hash")
    assert response.status_code == 200
    assert response.json()["certificate_hash"] == ZERO_HASH

    response = api_client.get("/certificate/NON_EXISTENT_CERT/verify")
    assert response.status_code == 200
    verification = response.json()
    assert verification["is_valid"] is False
    assert verification["issuer"] == ZERO_PRINCIPAL
    assert verification["marks"] == 0


def test_read_certificate_with_slash_in_id(
    api_client: TestClient, auth_factory, owner: str
):
    response = api_client.post(
        "/certificate/issue",
        json=CERTIFICATE | {"certificate_id": "2024/CS/017"},
        headers=auth_factory(owner),
    )
    assert response.status_code == 201
    expected_hash = response.json()["certificate_hash"]

    for path in ["/certificate/2024/CS/017", "/certificate/2024%2FCS%2F017"]:
        response = api_client.get(f"{path}/exists")
        assert response.status_code == 200
        assert response.json() == {"certificate_id": "2024/CS/017", "exists": True}

    response = api_client.get("/certificate/2024/CS/017/hash")
    assert response.status_code == 200
    assert response.json()["certificate_hash"] == expected_hash

    response = api_client.get("/certificate/2024/CS/017/verify")
    assert response.status_code == 200
    assert response.json()["is_valid"] is True
    assert response.json()["name"] == "Asha Verma"

    response = api_client.get("/certificate/2024/CS/018/exists")
    assert response.status_code == 200
    assert response.json() == {"certificate_id": "2024/CS/018", "exists": False}


def test_issue_certificate_errors(
    api_client: TestClient, auth_factory, owner: str, outsider: str
):
    # Test case 1: caller is not an authorized issuer
    response = api_client.post(
        "/certificate/issue", json=CERTIFICATE, headers=auth_factory(outsider)
    )
    assert response.status_code == 403
    assert response.json()["error_message"] == (
        "You are not authorized to issue certificates"
    )
    assert api_client.get("/certificate/CERT001/exists").json()["exists"] is False

    # Test case 2: the same ID twice
    response = api_client.post(
        "/certificate/issue", json=CERTIFICATE, headers=auth_factory(owner)
    )
    assert response.status_code == 201

    response = api_client.post(
        "/certificate/issue",
        json=CERTIFICATE | {"marks": 90},
        headers=auth_factory(owner),
    )
    assert response.status_code == 409
    assert response.json()["error_type"] == "duplicate_id"

    # Test case 3: the same content under a new ID
    response = api_client.post(
        "/certificate/issue",
        json=CERTIFICATE | {"certificate_id": "CERT002"},
        headers=auth_factory(owner),
    )
    assert response.status_code == 409
    assert response.json()["error_type"] == "duplicate_content"
    assert api_client.get("/certificate/CERT002/exists").json()["exists"] is False


def test_rejection_body_carries_request_details(
    api_client: TestClient, auth_factory, outsider: str
):
    response = api_client.post(
        "/certificate/issue", json=CERTIFICATE, headers=auth_factory(outsider)
    )

    assert response.status_code == 403
    assert response.json() == {
        "status_code": 403,
        "error_message": "You are not authorized to issue certificates",
        "details": {
            "caller": outsider,
            "method": "POST",
            "path": "/certificate/issue",
        },
        "error_type": "not_authorized",
    }


def test_issue_certificate_validation_error(
    api_client: TestClient, auth_factory, owner: str
):
    response = api_client.post(
        "/certificate/issue",
        json=CERTIFICATE | {"marks": -5},
        headers=auth_factory(owner),
    )

    assert response.status_code == 422
    body = response.json()
    assert body["error_type"] == "validation_error"
    assert body["details"]["errors"][0]["field"] == "marks"


def test_issue_certificates_bulk(
    api_client: TestClient, auth_factory, owner: str, issuer: str
):
    api_client.post(
        "/access/issuers", json={"principal": issuer}, headers=auth_factory(owner)
    )

    payload = {
        "certificate_ids": ["BULK001", "BULK002"],
        "certificates": [
            {"name": "Asha Verma", "roll_number": "21CS017", "marks": 87},
            {"name": "Ravi Kumar", "roll_number": "21CS042", "marks": 91},
        ],
    }
    response = api_client.post(
        "/certificate/issue_bulk", json=payload, headers=auth_factory(issuer)
    )

    assert response.status_code == 201
    assert [record["certificate_id"] for record in response.json()] == [
        "BULK001",
        "BULK002",
    ]

    events = api_client.get("/events", params={"from_position": 1}).json()
    assert [event["event_type"] for event in events] == [
        "CertificateIssued",
        "CertificateIssued",
        "CertificatesIssuedBulk",
    ]
    assert events[-1]["attributes"]["certificate_ids"] == ["BULK001", "BULK002"]
    assert events[-1]["attributes"]["issuer"] == issuer


def test_issue_certificates_bulk_is_atomic(
    api_client: TestClient, auth_factory, owner: str
):
    api_client.post(
        "/certificate/issue",
        json=CERTIFICATE | {"certificate_id": "B1"},
        headers=auth_factory(owner),
    )

    payload = {
        "certificate_ids": ["B1", "B2"],
        "certificates": [
            {"name": "Ravi Kumar", "roll_number": "21CS042", "marks": 91},
            {"name": "Meera Nair", "roll_number": "21CS051", "marks": 78},
        ],
    }
    response = api_client.post(
        "/certificate/issue_bulk", json=payload, headers=auth_factory(owner)
    )

    assert response.status_code == 409
    assert api_client.get("/certificate/B2/exists").json()["exists"] is False


def test_issue_certificates_bulk_length_mismatch(
    api_client: TestClient, auth_factory, owner: str
):
    payload = {
        "certificate_ids": ["BULK001"],
        "certificates": [
            {"name": "Asha Verma", "roll_number": "21CS017", "marks": 87},
            {"name": "Ravi Kumar", "roll_number": "21CS042", "marks": 91},
        ],
    }
    response = api_client.post(
        "/certificate/issue_bulk", json=payload, headers=auth_factory(owner)
    )

    assert response.status_code == 400
    assert response.json()["error_message"] == "Input arrays must have the same length"


def test_import_certificates_csv(api_client: TestClient, auth_factory, owner: str):
    content = (
        "certificate_id,name,roll_number,marks\n"
        "IMP001,Asha Verma,007,87\n"
        "IMP002,Ravi Kumar,008,91\n"
    )

    response = api_client.post(
        "/certificate/import",
        files={"file": ("certificates.csv", content, "text/csv")},
        headers=auth_factory(owner),
    )

    assert response.status_code == 201
    assert response.json() == {
        "message": "Certificates imported successfully.",
        "number_of_imported_certificates": 2,
        "certificate_ids": ["IMP001", "IMP002"],
    }
    assert api_client.get("/certificate/IMP001/verify").json()["roll_number"] == "007"


def test_import_certificates_json(api_client: TestClient, auth_factory, owner: str):
    content = json.dumps(
        [
            {
                "certificate_id": "IMP001",
                "name": "Asha Verma",
                "roll_number": "007",
                "marks": 87,
            }
        ]
    )

    response = api_client.post(
        "/certificate/import",
        files={"file": ("certificates.json", content, "application/json")},
        headers=auth_factory(owner),
    )

    assert response.status_code == 201
    assert api_client.get("/certificate/IMP001/verify").json()["marks"] == 87


def test_import_certificates_missing_columns(
    api_client: TestClient, auth_factory, owner: str
):
    response = api_client.post(
        "/certificate/import",
        files={"file": ("certificates.csv", "certificate_id,name\nIMP001,A\n", "text/csv")},
        headers=auth_factory(owner),
    )

    assert response.status_code == 400
    assert "missing required columns" in response.json()["error_message"]
