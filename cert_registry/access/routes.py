from fastapi import APIRouter, Depends

from cert_registry.access.schemas import IssuerAuthorize, IssuerStatusRead, OwnerRead
from cert_registry.authentication.services import get_current_principal
from cert_registry.certificate.services import CertificateRegistry
from cert_registry.core.models.base import Principal
from cert_registry.core.registry import get_registry

# Router initialisation
router = APIRouter(tags=["Access"])


@router.post("/issuers", response_model=IssuerStatusRead, status_code=201)
def authorize_issuer(
    request: IssuerAuthorize,
    caller: Principal = Depends(get_current_principal),
    registry: CertificateRegistry = Depends(get_registry),
):
    """Grant a principal the right to issue certificates. Owner only."""
    registry.access.authorize_issuer(caller, request.principal)

    return IssuerStatusRead(
        principal=request.principal,
        is_authorized=registry.access.is_authorized(request.principal),
    )


@router.get("/issuers/{principal}", response_model=IssuerStatusRead)
def read_issuer_status(
    principal: str,
    registry: CertificateRegistry = Depends(get_registry),
):
    """Return whether a principal may issue certificates."""
    return IssuerStatusRead(
        principal=principal, is_authorized=registry.access.is_authorized(principal)
    )


@router.get("/owner", response_model=OwnerRead)
def read_owner(registry: CertificateRegistry = Depends(get_registry)):
    return OwnerRead(owner=registry.access.owner)
