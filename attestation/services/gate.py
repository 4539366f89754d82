import logging
from typing import Callable, Optional

from attestation.domain.models import CLOSED, ConfirmationRequest

logger = logging.getLogger(__name__)


class ConfirmationGate:
    """
    Holds at most one destructive action until the user says yes or no.

    request_confirmation() only stores the action; confirm() runs it once,
    cancel() drops it. A second request while one is open replaces the
    first. The gate never looks at quiz state, it just defers a
    zero-argument callable.
    """

    def __init__(self):
        self._request: ConfirmationRequest = CLOSED

    @property
    def request(self) -> ConfirmationRequest:
        return self._request

    @property
    def is_open(self) -> bool:
        return self._request.is_open

    def request_confirmation(self, title: str, message: str,
                             action: Optional[Callable[[], None]]) -> None:
        if action is None:
            raise ValueError("a confirmation request needs an action to run")
        if self._request.is_open:
            logger.debug("replacing pending confirmation %r", self._request.title)
        self._request = ConfirmationRequest(
            is_open=True, title=title, message=message, pending_action=action
        )

    def confirm(self) -> None:
        pending = self._request
        if not pending.is_open:
            return
        # close first so a failing action still leaves the gate closed
        self._request = CLOSED
        logger.info("confirmed: %s", pending.title)
        pending.pending_action()

    def cancel(self) -> None:
        if not self._request.is_open:
            return
        logger.info("cancelled: %s", self._request.title)
        self._request = CLOSED
