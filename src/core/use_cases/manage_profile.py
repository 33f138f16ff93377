"""
Use Case: Manage Profile

Consulta do perfil, alteração de contato (telefone / e-mail), troca
de senha e foto de perfil. Nenhuma dessas operações muda o status.
"""

import logging

from src.core.concurrency import DriverLocks
from src.core.entities.driver import Driver
from src.core.errors import AuthError, ConflictError, PasswordMismatchError, ValidationError
from src.core.interfaces.driver_repository import IDriverRepository
from src.core.interfaces.password_hasher import IPasswordHasher
from src.core.rules import brazilian_driver_rules as rules

logger = logging.getLogger(__name__)


class ManageProfileUseCase:

    def __init__(
        self,
        repository: IDriverRepository,
        password_hasher: IPasswordHasher,
        locks: DriverLocks | None = None,
    ):
        self._repo = repository
        self._hasher = password_hasher
        self._locks = locks or DriverLocks()

    def get(self, driver_id: str) -> Driver:
        return self._repo.get_by_id(driver_id)

    def update_contact(self, driver_id: str, phone: str | None = None, email: str | None = None) -> Driver:
        """
        Atualiza telefone e/ou e-mail com os mesmos validadores do cadastro.

        Raises:
            ValidationError: nenhum campo informado ou formato inválido.
            ConflictError: e-mail pertence a outro motorista.
        """
        phone = rules.only_digits(phone) if phone and phone.strip() else None
        email = rules.normalize_email(email) if email and email.strip() else None
        if phone is None and email is None:
            raise ValidationError("profile", "empty", "informe telefone ou e-mail")

        if phone is not None:
            rules.validate_phone(phone)
        if email is not None:
            rules.validate_email(email)

        with self._locks.hold(driver_id):
            driver = self._repo.get_by_id(driver_id)

            if email is not None and email != driver.email:
                owner = self._repo.find_by_email(email)
                if owner is not None and owner.id != driver.id:
                    raise ConflictError("email")
                driver.email = email
            if phone is not None:
                driver.phone = phone

            driver.touch()
            driver = self._repo.update(driver)

        logger.info(f"Profile updated: id={driver_id}")
        return driver

    def change_password(self, driver_id: str, current: str, new: str, confirmation: str) -> Driver:
        """
        Raises:
            ValidationError: senha atual ou nova em branco.
            AuthError: senha atual incorreta.
            PasswordMismatchError: nova senha diferente da confirmação.
            WeakPasswordError: nova senha fraca.
        """
        if not (current or "").strip():
            raise ValidationError("current_password", "required", "senha atual é obrigatória")
        new = (new or "").strip()
        confirmation = (confirmation or "").strip()

        with self._locks.hold(driver_id):
            driver = self._repo.get_by_id(driver_id)
            if not self._hasher.verify(current, driver.password_hash):
                raise AuthError("senha atual incorreta", code="motorista.senha_atual_incorreta")
            if not new:
                raise ValidationError("new_password", "required", "nova senha é obrigatória")
            if new != confirmation:
                raise PasswordMismatchError("new_password_confirmation")
            rules.check_password_strength(new)

            driver.password_hash = self._hasher.hash(new)
            driver.touch()
            driver = self._repo.update(driver)

        logger.info(f"Password changed: id={driver_id}")
        return driver

    def replace_photo(self, driver_id: str, file_path: str, file_format: str, size_bytes: int) -> Driver:
        rules.validate_profile_photo(file_format, size_bytes)

        with self._locks.hold(driver_id):
            driver = self._repo.get_by_id(driver_id)
            driver.profile_photo_path = file_path
            driver.touch()
            driver = self._repo.update(driver)

        logger.info(f"Profile photo replaced: id={driver_id}")
        return driver
