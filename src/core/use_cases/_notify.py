"""Best-effort notification helper shared by the use cases."""

import logging
from typing import Callable

logger = logging.getLogger(__name__)


def notify_safely(event: str, send: Callable[..., bool], *args) -> bool:
    """
    Calls a notifier method; failures are logged, never raised.

    Returns:
        True when the notifier reported success.
    """
    try:
        ok = bool(send(*args))
    except Exception as e:
        logger.warning(f"Notifier '{event}' raised: {e}")
        return False
    if not ok:
        logger.warning(f"Notifier '{event}' reported failure")
    return ok
