"""
Adapter: JSON File Driver Repository

Guarda todos os motoristas num único arquivo JSON ({"drivers": [...]}),
na ordem de criação. Cada operação relê o arquivo e cada escrita é
atômica (arquivo temporário + os.replace). Serve a um único processo:
o lock é local.
"""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from src.core.entities.driver import Driver, DriverStatus
from src.core.errors import ConflictError, InfraError, NotFoundError, StaleRecordError
from src.core.interfaces.driver_repository import IDriverRepository

logger = logging.getLogger(__name__)

UNIQUE_KEYS = {
    "national_id": "nationalId",
    "license_number": "licenseNumber",
    "email": "email",
}


class JsonFileDriverRepository(IDriverRepository):

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    def create(self, driver: Driver) -> Driver:
        with self._lock:
            rows = self._load()
            for row in rows:
                if row["id"] == driver.id:
                    raise ConflictError("id", f"motorista {driver.id} já existe")
                for attr, key in UNIQUE_KEYS.items():
                    if row[key] == getattr(driver, attr):
                        raise ConflictError(attr)

            driver.version = 1
            rows.append(driver.to_dict())
            self._save(rows)
        logger.info(f"Created driver {driver.id} in {self._path}")
        return driver

    def get_by_id(self, driver_id: str) -> Driver:
        with self._lock:
            for row in self._load():
                if row["id"] == driver_id:
                    return Driver.from_dict(row)
        raise NotFoundError("driver")

    def find_by_national_id(self, national_id: str) -> Driver | None:
        return self._find("nationalId", national_id)

    def find_by_license_number(self, license_number: str) -> Driver | None:
        return self._find("licenseNumber", license_number)

    def find_by_email(self, email: str) -> Driver | None:
        return self._find("email", email)

    def update(self, driver: Driver) -> Driver:
        with self._lock:
            rows = self._load()
            index = next((i for i, r in enumerate(rows) if r["id"] == driver.id), None)
            if index is None:
                raise NotFoundError("driver")
            if rows[index]["version"] != driver.version:
                raise StaleRecordError(driver.id)
            for row in rows:
                if row["id"] == driver.id:
                    continue
                for attr, key in UNIQUE_KEYS.items():
                    if row[key] == getattr(driver, attr):
                        raise ConflictError(attr)

            driver.version += 1
            rows[index] = driver.to_dict()
            self._save(rows)
        return driver

    def list_by_status(self, status: DriverStatus, limit: int = 50, offset: int = 0) -> list[Driver]:
        with self._lock:
            rows = [r for r in self._load() if r["status"] == status.value]
        drivers = sorted((Driver.from_dict(r) for r in rows), key=lambda d: d.created_at)
        return drivers[offset:offset + limit]

    # ─── Helpers ─────────────────────────────────────────────

    def _find(self, key: str, value: str) -> Driver | None:
        with self._lock:
            for row in self._load():
                if row[key] == value:
                    return Driver.from_dict(row)
        return None

    def _load(self) -> list[dict]:
        if not self._path.exists():
            return []
        try:
            with open(self._path, encoding="utf-8") as f:
                return json.load(f).get("drivers", [])
        except (OSError, ValueError) as e:
            raise InfraError(f"falha ao ler {self._path}: {e}") from e

    def _save(self, rows: list[dict]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({"drivers": rows}, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self._path)
        except OSError as e:
            logger.error(f"Failed to write {self._path}: {e}")
            raise InfraError(f"falha ao gravar {self._path}: {e}") from e
