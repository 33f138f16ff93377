"""Test doubles and payload builders shared across test modules."""

from dataclasses import replace
from datetime import date

from src.core.interfaces.notifier import INotifier
from src.core.interfaces.password_hasher import IPasswordHasher
from src.core.use_cases.register_driver import RegistrationInput
from src.core.use_cases.submit_documents import DocumentUpload

VALID_CPF = "11144477735"
OTHER_CPF = "52998224725"
STRONG_PASSWORD = "Abcdefgh123!@"


class RecordingNotifier(INotifier):
    """Keeps every call; `fail=True` makes every method raise."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[tuple] = []

    def _record(self, *call) -> bool:
        self.calls.append(call)
        if self.fail:
            raise ConnectionError("smtp down")
        return True

    def notify_registration(self, email, name):
        return self._record("registration", email, name)

    def notify_documents_received(self, email, name):
        return self._record("documents_received", email, name)

    def notify_approval(self, email, name):
        return self._record("approval", email, name)

    def notify_rejection(self, email, name, reason):
        return self._record("rejection", email, name, reason)

    def events(self) -> list[str]:
        return [c[0] for c in self.calls]


class PlainHasher(IPasswordHasher):
    """bcrypt is slow on purpose; tests only need hash != password."""

    def hash(self, password: str) -> str:
        return f"plain${password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"plain${password}"


def registration_input(**overrides) -> RegistrationInput:
    """A payload that passes every rule today; override fields per test."""
    year = date.today().year
    data = RegistrationInput(
        name="Maria Silva",
        birth_date=f"10/05/{year - 30}",
        national_id="111.444.777-35",
        license_number="12345678901",
        license_category="b",
        license_expiry=f"10/05/{year + 3}",
        plate="abc-1d23",
        vehicle_model="Onix 1.0",
        phone="(11) 98765-4321",
        email="Maria@Example.com",
        password=STRONG_PASSWORD,
        password_confirmation=STRONG_PASSWORD,
    )
    return replace(data, **overrides)


def upload(doc_type: str, fmt: str = "pdf", size: int = 1024, path: str | None = None) -> DocumentUpload:
    return DocumentUpload(
        doc_type=doc_type,
        file_path=path or f"/data/uploads/{doc_type}.{fmt}",
        format=fmt,
        size_bytes=size,
    )
