"""
Use Case: Authenticate Driver

Verifica e-mail + senha contra o hash armazenado. Não emite token:
quem chama decide o que fazer com o motorista autenticado.
"""

import logging

from src.core.entities.driver import Driver
from src.core.errors import AuthError
from src.core.interfaces.driver_repository import IDriverRepository
from src.core.interfaces.password_hasher import IPasswordHasher
from src.core.rules.brazilian_driver_rules import normalize_email

logger = logging.getLogger(__name__)


class AuthenticateDriverUseCase:

    def __init__(self, repository: IDriverRepository, password_hasher: IPasswordHasher):
        self._repo = repository
        self._hasher = password_hasher

    def execute(self, email: str, password: str) -> Driver:
        """
        Raises:
            AuthError: e-mail desconhecido ou senha incorreta (mesma mensagem).
        """
        driver = self._repo.find_by_email(normalize_email(email))
        if driver is None or not password or not self._hasher.verify(password, driver.password_hash):
            logger.info("Login rejected")
            raise AuthError("e-mail ou senha incorretos")
        return driver
