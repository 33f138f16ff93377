"""
Adapter: SMTP E-mail Notifier

Envia os e-mails de cadastro, recebimento de documentos, aprovação e
rejeição. Falhas de rede/SMTP viram `False` + log; nunca exceção.
"""

import logging
import smtplib
from email.message import EmailMessage

from src.core.interfaces.notifier import INotifier
from src.infrastructure.notifications import messages

logger = logging.getLogger(__name__)


class SmtpEmailNotifier(INotifier):

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self._host = host
        self._port = port
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "SmtpEmailNotifier":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.smtp_sender,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout_seconds,
        )

    def notify_registration(self, email: str, name: str) -> bool:
        return self.send(email, *messages.registration(name))

    def notify_documents_received(self, email: str, name: str) -> bool:
        return self.send(email, *messages.documents_received(name))

    def notify_approval(self, email: str, name: str) -> bool:
        return self.send(email, *messages.approval(name))

    def notify_rejection(self, email: str, name: str, reason: str) -> bool:
        return self.send(email, *messages.rejection(name, reason))

    def send(self, to_email: str, subject: str, body: str) -> bool:
        msg = EmailMessage()
        msg["To"] = to_email
        msg["From"] = self._sender
        msg["Subject"] = subject
        msg.set_content(body)

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
                if self._use_tls:
                    smtp.starttls()
                if self._username:
                    smtp.login(self._username, self._password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"SMTP send to {to_email} failed: {e}")
            return False

        logger.info(f"E-mail '{subject}' sent to {to_email}")
        return True
