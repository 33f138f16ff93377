"""
Contract: Driver Repository

Persistência do agregado Driver. O core depende apenas deste contrato;
o backend concreto (memória, arquivo JSON, SQL) fica na infraestrutura.
"""

from abc import ABC, abstractmethod

from src.core.entities.driver import Driver, DriverStatus


class IDriverRepository(ABC):
    """
    Port: Driver Repository

    Garantias exigidas de qualquer implementação:
      - `create` rejeita atomicamente CPF, CNH ou e-mail já existentes
        (ConflictError), mesmo que duas criações corram em paralelo.
      - `update` é uma escrita condicional em `driver.version`
        (StaleRecordError quando o registro mudou desde a leitura) e
        incrementa a versão do objeto recebido em caso de sucesso.
      - Leituras devolvem cópias independentes: mutar o objeto lido
        não altera o store até o próximo `update`.
      - Falhas de I/O viram InfraError com contexto.
    """

    @abstractmethod
    def create(self, driver: Driver) -> Driver:
        """
        Persiste um novo motorista.

        Raises:
            ConflictError: CPF, CNH ou e-mail já cadastrados.
        """
        ...

    @abstractmethod
    def get_by_id(self, driver_id: str) -> Driver:
        """
        Raises:
            NotFoundError: motorista inexistente.
        """
        ...

    @abstractmethod
    def find_by_national_id(self, national_id: str) -> Driver | None:
        ...

    @abstractmethod
    def find_by_license_number(self, license_number: str) -> Driver | None:
        ...

    @abstractmethod
    def find_by_email(self, email: str) -> Driver | None:
        ...

    @abstractmethod
    def update(self, driver: Driver) -> Driver:
        """
        Grava o estado completo do motorista.

        Raises:
            NotFoundError: motorista inexistente.
            StaleRecordError: versão desatualizada.
            ConflictError: e-mail alterado para um já existente.
        """
        ...

    @abstractmethod
    def list_by_status(self, status: DriverStatus, limit: int = 50, offset: int = 0) -> list[Driver]:
        """Fila de análise: motoristas num status, mais antigos primeiro."""
        ...
