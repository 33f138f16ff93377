"""
Use Case: Review Driver

Aprovação e rejeição manuais. A aprovação reconfere os documentos
obrigatórios no próprio registro, sem deduzir nada do status atual.
"""

import logging

from src.core.concurrency import DriverLocks
from src.core.entities.driver import Driver, DriverStatus
from src.core.errors import PendingDocumentsError, ValidationError
from src.core.interfaces.driver_repository import IDriverRepository
from src.core.interfaces.notifier import INotifier
from src.core.use_cases._notify import notify_safely

logger = logging.getLogger(__name__)


class ReviewDriverUseCase:

    def __init__(
        self,
        repository: IDriverRepository,
        notifier: INotifier,
        locks: DriverLocks | None = None,
    ):
        self._repo = repository
        self._notifier = notifier
        self._locks = locks or DriverLocks()

    def approve(self, driver_id: str) -> Driver:
        """
        Aprova o motorista e todos os seus documentos.

        Raises:
            NotFoundError: motorista inexistente.
            PendingDocumentsError: falta algum tipo obrigatório.
            InvalidTransitionError: status atual não permite aprovação.
        """
        with self._locks.hold(driver_id):
            driver = self._repo.get_by_id(driver_id)

            missing = driver.missing_document_types()
            if missing:
                raise PendingDocumentsError([t.value for t in missing])

            driver.transition_to(DriverStatus.APPROVED)
            driver.approve_documents()
            driver = self._repo.update(driver)

        logger.info(f"Driver APPROVED: id={driver_id}")
        notify_safely("approval", self._notifier.notify_approval, driver.email, driver.name)
        return driver

    def reject(self, driver_id: str, reason: str) -> Driver:
        """Rejeita com motivo obrigatório; documentos não são descartados."""
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError(
                "reason", "required", "motivo é obrigatório",
                code="validation.campo_obrigatorio",
            )

        with self._locks.hold(driver_id):
            driver = self._repo.get_by_id(driver_id)
            driver.transition_to(DriverStatus.REJECTED)
            driver = self._repo.update(driver)

        logger.info(f"Driver REJECTED: id={driver_id}, reason={reason}")
        notify_safely("rejection", self._notifier.notify_rejection, driver.email, driver.name, reason)
        return driver

    def review_queue(self, limit: int = 50, offset: int = 0) -> list[Driver]:
        """Motoristas aguardando análise, mais antigos primeiro."""
        return self._repo.list_by_status(DriverStatus.IN_REVIEW, limit=limit, offset=offset)
