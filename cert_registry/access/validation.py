from cert_registry.core.error_handling import NotAuthorized, Unauthorized
from cert_registry.core.models.base import Principal
from cert_registry.core.state import RegistryState
from cert_registry.logging_config import logger


def validate_owner(state: RegistryState, caller: Principal):
    """
    Validate that the caller owns the registry.

    Args:
        state (RegistryState): The registry state to check against
        caller (Principal): The principal making the call

    Raises:
        Unauthorized: If the caller is not the owner.
    """

    if caller != state.owner:
        logger.warning(f"Rejected owner-only call from {caller}")
        raise Unauthorized(caller=caller)


def validate_issuer(state: RegistryState, caller: Principal):
    """
    Validate that the caller is allowed to issue certificates.

    Args:
        state (RegistryState): The registry state to check against
        caller (Principal): The principal making the call

    Raises:
        NotAuthorized: If the caller is not an authorized issuer.
    """

    if not state.authorized_issuers.get(caller, False):
        logger.warning(f"Rejected issuance from unauthorized principal {caller}")
        raise NotAuthorized(caller=caller)
