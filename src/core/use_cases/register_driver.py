"""
Use Case: Register Driver

Orquestra o cadastro: sanitização → validadores → unicidade →
datas → criação no repositório → notificação (best effort).
"""

import logging
import uuid
from dataclasses import dataclass, replace

from src.core.entities.driver import Driver, DriverStatus
from src.core.errors import ConflictError, PasswordMismatchError, ValidationError
from src.core.interfaces.driver_repository import IDriverRepository
from src.core.interfaces.notifier import INotifier
from src.core.interfaces.password_hasher import IPasswordHasher
from src.core.rules import brazilian_driver_rules as rules
from src.core.use_cases._notify import notify_safely

logger = logging.getLogger(__name__)


@dataclass
class RegistrationInput:
    """Dados brutos do formulário de cadastro."""
    name: str
    birth_date: str             # DD/MM/AAAA
    national_id: str            # CPF, com ou sem máscara
    license_number: str         # CNH
    license_category: str
    license_expiry: str         # DD/MM/AAAA
    plate: str
    vehicle_model: str
    phone: str
    email: str
    password: str
    password_confirmation: str


# (campo, nome exibido) na ordem em que a presença é verificada
REQUIRED_FIELDS = [
    ("name", "nome"),
    ("birth_date", "data de nascimento"),
    ("national_id", "CPF"),
    ("license_number", "CNH"),
    ("license_category", "categoria da CNH"),
    ("license_expiry", "validade da CNH"),
    ("plate", "placa do veículo"),
    ("vehicle_model", "modelo do veículo"),
    ("phone", "telefone"),
    ("email", "e-mail"),
    ("password", "senha"),
    ("password_confirmation", "confirmação de senha"),
]


def sanitize(data: RegistrationInput) -> RegistrationInput:
    """Remove máscaras e espaços; normaliza caixa de placa e e-mail."""
    return replace(
        data,
        name=(data.name or "").strip(),
        birth_date=(data.birth_date or "").strip(),
        national_id=rules.only_digits(data.national_id),
        license_number=rules.only_digits(data.license_number),
        license_category=(data.license_category or "").strip().upper(),
        license_expiry=(data.license_expiry or "").strip(),
        plate=rules.normalize_plate(data.plate),
        vehicle_model=(data.vehicle_model or "").strip(),
        phone=rules.only_digits(data.phone),
        email=rules.normalize_email(data.email),
        password=(data.password or "").strip(),
        password_confirmation=(data.password_confirmation or "").strip(),
    )


class RegisterDriverUseCase:
    """
    Use Case: cadastra um novo motorista em "aguardando_documentos".

    A checagem de unicidade aqui é só para devolver a mensagem certa;
    a garantia real vem do repositório, que rejeita duplicatas na
    escrita mesmo quando dois cadastros passam juntos pela checagem.
    """

    def __init__(
        self,
        repository: IDriverRepository,
        notifier: INotifier,
        password_hasher: IPasswordHasher,
    ):
        self._repo = repository
        self._notifier = notifier
        self._hasher = password_hasher

    def execute(self, data: RegistrationInput) -> Driver:
        # ── 1. Sanitização ─────────────────────────────────
        data = sanitize(data)

        # ── 2. Presença + formatos ─────────────────────────
        self.validate(data)

        # ── 3. Confirmação de senha ────────────────────────
        if data.password != data.password_confirmation:
            raise PasswordMismatchError()

        # ── 4. Unicidade (consultiva) ──────────────────────
        self._check_unique(data)

        # ── 5. Datas ───────────────────────────────────────
        birth_date = rules.parse_br_date(data.birth_date, "data_nascimento")
        license_expiry = rules.parse_br_date(data.license_expiry, "validade_cnh")

        # ── 6. Idade e validade da CNH ─────────────────────
        rules.validate_age(birth_date)
        rules.validate_license_expiry(license_expiry)

        # ── 7. Criação ─────────────────────────────────────
        driver = Driver(
            id=str(uuid.uuid4()),
            name=data.name,
            birth_date=birth_date,
            national_id=data.national_id,
            license_number=data.license_number,
            license_category=rules.validate_license_category(data.license_category),
            license_expiry=license_expiry,
            plate=data.plate,
            vehicle_model=data.vehicle_model,
            phone=data.phone,
            email=data.email,
            password_hash=self._hasher.hash(data.password),
            status=DriverStatus.PENDING_DOCUMENTS,
        )
        try:
            driver = self._repo.create(driver)
        except ConflictError as e:
            logger.info(f"Registration lost uniqueness race on {e.key}")
            raise
        logger.info(f"Driver registered: id={driver.id} status={driver.status.value}")

        # ── 8. Notificação ─────────────────────────────────
        notify_safely("registration", self._notifier.notify_registration, driver.email, driver.name)
        return driver

    def validate(self, data: RegistrationInput) -> None:
        """Valida dados já sanitizados; a primeira regra que falhar interrompe."""
        for attr, label in REQUIRED_FIELDS:
            if not getattr(data, attr):
                raise ValidationError(
                    attr, "required", f"{label} é obrigatório",
                    code="validation.campo_obrigatorio",
                )

        rules.validate_text_length("name", data.name, 2, 100)
        rules.validate_national_id(data.national_id)
        rules.validate_license_number(data.license_number)
        rules.validate_license_category(data.license_category)
        rules.validate_email(data.email)
        rules.validate_phone(data.phone)
        rules.validate_plate(data.plate)
        rules.validate_text_length("vehicle_model", data.vehicle_model, 3, 100)
        rules.check_password_strength(data.password)

    def _check_unique(self, data: RegistrationInput) -> None:
        if self._repo.find_by_national_id(data.national_id) is not None:
            raise ConflictError("national_id")
        if self._repo.find_by_license_number(data.license_number) is not None:
            raise ConflictError("license_number")
        if self._repo.find_by_email(data.email) is not None:
            raise ConflictError("email")
