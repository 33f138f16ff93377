"""
Use Case: Close Account

Pedido e confirmação de exclusão. O registro nunca é apagado aqui:
"encerrado" é um status; o expurgo fica com um processo agendado externo.

Ambos valem a partir de qualquer status não encerrado. Repetir o pedido
de exclusão não é erro: o motorista continua aguardando a exclusão.
"""

import logging

from src.core.concurrency import DriverLocks
from src.core.entities.driver import Driver, DriverStatus
from src.core.interfaces.driver_repository import IDriverRepository

logger = logging.getLogger(__name__)


class CloseAccountUseCase:

    def __init__(self, repository: IDriverRepository, locks: DriverLocks | None = None):
        self._repo = repository
        self._locks = locks or DriverLocks()

    def request_deletion(self, driver_id: str) -> Driver:
        return self._move(driver_id, DriverStatus.DELETION_REQUESTED)

    def confirm_deletion(self, driver_id: str) -> Driver:
        return self._move(driver_id, DriverStatus.CLOSED)

    def _move(self, driver_id: str, target: DriverStatus) -> Driver:
        with self._locks.hold(driver_id):
            driver = self._repo.get_by_id(driver_id)
            if driver.status == target and target == DriverStatus.DELETION_REQUESTED:
                logger.info(f"Driver {driver_id} already {target.value}")
                return driver
            driver.transition_to(target)
            driver = self._repo.update(driver)
        logger.info(f"Driver {driver_id} moved to {target.value}")
        return driver
