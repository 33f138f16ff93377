"""
Adapter: In-Memory Driver Repository

Implementação de referência do contrato IDriverRepository. Guarda o
formato serializado de cada motorista (to_dict), então toda leitura
devolve uma cópia independente e o round-trip é exercitado sempre.

Unicidade e versão são verificadas sob um único lock do store, o que
torna `create` e `update` atômicos entre threads.
"""

import logging
import threading

from src.core.entities.driver import Driver, DriverStatus
from src.core.errors import ConflictError, NotFoundError, StaleRecordError
from src.core.interfaces.driver_repository import IDriverRepository

logger = logging.getLogger(__name__)

UNIQUE_KEYS = ("national_id", "license_number", "email")


class InMemoryDriverRepository(IDriverRepository):

    def __init__(self):
        self._lock = threading.Lock()
        self._rows: dict[str, dict] = {}
        self._indexes: dict[str, dict[str, str]] = {key: {} for key in UNIQUE_KEYS}

    def create(self, driver: Driver) -> Driver:
        with self._lock:
            if driver.id in self._rows:
                raise ConflictError("id", f"motorista {driver.id} já existe")
            for key in UNIQUE_KEYS:
                if getattr(driver, key) in self._indexes[key]:
                    raise ConflictError(key)

            driver.version = 1
            self._rows[driver.id] = driver.to_dict()
            for key in UNIQUE_KEYS:
                self._indexes[key][getattr(driver, key)] = driver.id

        logger.debug(f"Created driver {driver.id}")
        return driver

    def get_by_id(self, driver_id: str) -> Driver:
        with self._lock:
            row = self._rows.get(driver_id)
        if row is None:
            raise NotFoundError("driver")
        return Driver.from_dict(row)

    def find_by_national_id(self, national_id: str) -> Driver | None:
        return self._find("national_id", national_id)

    def find_by_license_number(self, license_number: str) -> Driver | None:
        return self._find("license_number", license_number)

    def find_by_email(self, email: str) -> Driver | None:
        return self._find("email", email)

    def update(self, driver: Driver) -> Driver:
        with self._lock:
            current = self._rows.get(driver.id)
            if current is None:
                raise NotFoundError("driver")
            if current["version"] != driver.version:
                raise StaleRecordError(driver.id)

            stored = Driver.from_dict(current)
            for key in UNIQUE_KEYS:
                new_value = getattr(driver, key)
                owner = self._indexes[key].get(new_value)
                if owner is not None and owner != driver.id:
                    raise ConflictError(key)

            for key in UNIQUE_KEYS:
                old_value = getattr(stored, key)
                new_value = getattr(driver, key)
                if old_value != new_value:
                    del self._indexes[key][old_value]
                    self._indexes[key][new_value] = driver.id

            driver.version += 1
            self._rows[driver.id] = driver.to_dict()
        return driver

    def list_by_status(self, status: DriverStatus, limit: int = 50, offset: int = 0) -> list[Driver]:
        with self._lock:
            rows = [r for r in self._rows.values() if r["status"] == status.value]
        drivers = sorted((Driver.from_dict(r) for r in rows), key=lambda d: d.created_at)
        return drivers[offset:offset + limit]

    def _find(self, key: str, value: str) -> Driver | None:
        with self._lock:
            driver_id = self._indexes[key].get(value)
            row = self._rows.get(driver_id) if driver_id else None
        return Driver.from_dict(row) if row else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)
