"""Tests for notifiers, the bcrypt hasher, local file storage and driver locks."""

import smtplib
import threading
import time
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from src.core.concurrency import DriverLocks
from src.core.errors import InfraError, NotFoundError
from src.core.use_cases._notify import notify_safely
from src.infrastructure.notifications import messages
from src.infrastructure.notifications.log_notifier import LoggingNotifier
from src.infrastructure.notifications.smtp_notifier import SmtpEmailNotifier
from src.infrastructure.security.bcrypt_hasher import BcryptPasswordHasher
from src.infrastructure.storage.local_storage import LocalFileStorage


# ── SMTP ──

@pytest.fixture
def smtp_notifier():
    return SmtpEmailNotifier(
        host="smtp.test", port=587, sender="no-reply@test",
        username="user", password="secret", use_tls=True, timeout=3,
    )


def test_smtp_sends_rejection_with_reason(smtp_notifier):
    with patch("src.infrastructure.notifications.smtp_notifier.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        assert smtp_notifier.notify_rejection("maria@example.com", "Maria", "CNH vencida") is True

    smtp_cls.assert_called_once_with("smtp.test", 587, timeout=3)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("user", "secret")
    msg = server.send_message.call_args.args[0]
    assert msg["To"] == "maria@example.com"
    assert msg["Subject"] == "Cadastro não aprovado"
    assert "CNH vencida" in msg.get_content()


def test_smtp_failure_returns_false(smtp_notifier):
    with patch("src.infrastructure.notifications.smtp_notifier.smtplib.SMTP") as smtp_cls:
        smtp_cls.side_effect = smtplib.SMTPConnectError(421, "down")
        assert smtp_notifier.notify_approval("maria@example.com", "Maria") is False


def test_smtp_without_tls_or_login():
    notifier = SmtpEmailNotifier(host="localhost", port=1025, sender="dev@test", use_tls=False)
    with patch("src.infrastructure.notifications.smtp_notifier.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        assert notifier.notify_registration("maria@example.com", "Maria") is True
    server.starttls.assert_not_called()
    server.login.assert_not_called()


def test_smtp_from_settings():
    settings = SimpleNamespace(
        smtp_host="mail", smtp_port=25, smtp_sender="s@x.com", smtp_username="",
        smtp_password="", smtp_use_tls=False, smtp_timeout_seconds=1.0,
    )
    notifier = SmtpEmailNotifier.from_settings(settings)
    with patch("src.infrastructure.notifications.smtp_notifier.smtplib.SMTP") as smtp_cls:
        notifier.notify_documents_received("a@x.com", "A")
    smtp_cls.assert_called_once_with("mail", 25, timeout=1.0)


def test_logging_notifier_always_succeeds(caplog):
    with caplog.at_level("INFO"):
        assert LoggingNotifier().notify_approval("maria@example.com", "Maria") is True
    assert "maria@example.com" in caplog.text


def test_messages_are_personalized():
    subject, body = messages.documents_received("Maria")
    assert subject == "Documentos recebidos"
    assert "Maria" in body


def test_notify_safely_swallows_errors(caplog):
    send = MagicMock(side_effect=RuntimeError("boom"))
    with caplog.at_level("WARNING"):
        assert notify_safely("approval", send, "a@x.com", "A") is False
    send.assert_called_once_with("a@x.com", "A")
    assert "boom" in caplog.text


# ── bcrypt ──

def test_bcrypt_hash_and_verify():
    hasher = BcryptPasswordHasher(rounds=4)
    hashed = hasher.hash("Abcdefgh123!@")
    assert hashed != "Abcdefgh123!@"
    assert hashed.startswith("$2")
    assert hasher.verify("Abcdefgh123!@", hashed)
    assert not hasher.verify("Abcdefgh123!#", hashed)


def test_bcrypt_salts_every_hash():
    hasher = BcryptPasswordHasher(rounds=4)
    assert hasher.hash("Abcdefg1!") != hasher.hash("Abcdefg1!")


def test_bcrypt_garbage_hash_does_not_verify():
    assert BcryptPasswordHasher(rounds=4).verify("Abcdefg1!", "plain-text") is False


# ── Local storage ──

def test_storage_save_and_read(tmp_path):
    storage = LocalFileStorage(tmp_path)
    ref = storage.save("driver-1", "CNH.pdf", b"%PDF-1.4", "application/pdf")

    assert ref.size_bytes == 8
    assert len(ref.sha256) == 64
    assert storage.exists(ref.path)
    assert storage.read(ref.path) == b"%PDF-1.4"
    assert (tmp_path / "driver-1" / "CNH.pdf").is_file()


def test_storage_keeps_files_inside_base_dir(tmp_path):
    storage = LocalFileStorage(tmp_path / "uploads")
    ref = storage.save("../../etc", "../passwd", b"x")
    assert (tmp_path / "uploads" / "etc" / "passwd").is_file()
    assert ref.path.startswith(str(tmp_path / "uploads"))
    with pytest.raises(InfraError):
        storage.save("..", "a.pdf", b"x")


def test_storage_read_missing(tmp_path):
    with pytest.raises(NotFoundError):
        LocalFileStorage(tmp_path).read(str(tmp_path / "nope.pdf"))


def test_storage_delete_is_idempotent(tmp_path):
    storage = LocalFileStorage(tmp_path)
    ref = storage.save("driver-1", "foto-1.png", b"png")
    storage.delete(ref.path)
    assert not storage.exists(ref.path)
    storage.delete(ref.path)


# ── DriverLocks ──

def test_driver_locks_serialize_same_driver():
    locks = DriverLocks()
    inside = []
    overlap = []

    def work():
        with locks.hold("d-1"):
            inside.append(1)
            if len(inside) > 1:
                overlap.append(True)
            time.sleep(0.01)
            inside.pop()

    threads = [threading.Thread(target=work) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert overlap == []
    assert len(locks) == 0


def test_driver_locks_independent_drivers():
    locks = DriverLocks()
    with locks.hold("a"):
        with locks.hold("b"):
            assert len(locks) == 2
    assert len(locks) == 0
