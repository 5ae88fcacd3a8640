from cert_registry.access.validation import validate_owner
from cert_registry.core.events import NotificationLog
from cert_registry.core.models.base import EventTypes, Principal
from cert_registry.core.state import RegistryState
from cert_registry.logging_config import logger


class AccessControl:
    """Tracks the registry owner and the principals allowed to issue certificates."""

    def __init__(self, state: RegistryState, notifications: NotificationLog):
        self.state = state
        self.notifications = notifications

    @property
    def owner(self) -> Principal:
        return self.state.owner

    def is_authorized(self, principal: Principal) -> bool:
        return self.state.authorized_issuers.get(principal, False)

    def authorize_issuer(self, caller: Principal, principal: Principal) -> None:
        """Grant issuing rights to `principal`. Only the owner may call this.

        Authorizing an already authorized principal is allowed and still
        produces an IssuerAuthorized notification.
        """
        with self.state.transaction() as state:
            validate_owner(state, caller)
            state.authorized_issuers[principal] = True
            events = self.notifications.append_events(
                [(EventTypes.ISSUER_AUTHORIZED, {"principal": principal})]
            )

        self.notifications.publish(events)

        logger.info(f"Issuer {principal} authorized by {caller}")
