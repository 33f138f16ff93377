"""
Adapter: Logging Notifier

Notificador de desenvolvimento: só registra no log o que seria enviado.
"""

import logging

from src.core.interfaces.notifier import INotifier
from src.infrastructure.notifications import messages

logger = logging.getLogger(__name__)


class LoggingNotifier(INotifier):

    def notify_registration(self, email: str, name: str) -> bool:
        return self._log(email, *messages.registration(name))

    def notify_documents_received(self, email: str, name: str) -> bool:
        return self._log(email, *messages.documents_received(name))

    def notify_approval(self, email: str, name: str) -> bool:
        return self._log(email, *messages.approval(name))

    def notify_rejection(self, email: str, name: str, reason: str) -> bool:
        return self._log(email, *messages.rejection(name, reason))

    @staticmethod
    def _log(email: str, subject: str, body: str) -> bool:
        logger.info(f"[notify] to={email} subject={subject!r}")
        logger.debug(body)
        return True
