"""
Driver Repository — SQLAlchemy implementation of IDriverRepository.

Handles:
  - Atomic uniqueness: relies on the UNIQUE constraints of `drivers`;
    IntegrityError is translated to ConflictError naming the key.
  - Conditional writes: `update` bumps `version` with
    UPDATE ... WHERE id = :id AND version = :expected.
  - Any other SQLAlchemy failure is wrapped in InfraError.
"""

import logging

from sqlalchemy import select, update as sql_update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from src.core.entities.driver import Driver, DriverStatus
from src.core.errors import ConflictError, InfraError, NotFoundError, OnboardingError, StaleRecordError
from src.core.interfaces.driver_repository import IDriverRepository
from src.infrastructure.db.database import get_db, get_session_factory
from src.infrastructure.db.models import DriverRecord

logger = logging.getLogger(__name__)

UNIQUE_COLUMNS = ("national_id", "license_number", "email")


class SqlDriverRepository(IDriverRepository):
    """Repository for drivers and their documents."""

    def __init__(self, session_factory: sessionmaker | None = None):
        self._factory = session_factory or get_session_factory()

    def create(self, driver: Driver) -> Driver:
        driver.version = 1
        try:
            with get_db(self._factory) as db:
                db.add(DriverRecord.from_entity(driver))
                db.flush()
        except IntegrityError as e:
            driver.version = 0
            raise self._conflict_from(e, driver) from e
        except SQLAlchemyError as e:
            driver.version = 0
            logger.error(f"Failed to create driver {driver.id}: {e}")
            raise InfraError(f"falha ao salvar motorista: {e}") from e
        logger.info(f"Saved driver {driver.id} [{driver.status.value}]")
        return driver

    def get_by_id(self, driver_id: str) -> Driver:
        driver = self._one(DriverRecord.id == driver_id)
        if driver is None:
            raise NotFoundError("driver")
        return driver

    def find_by_national_id(self, national_id: str) -> Driver | None:
        return self._one(DriverRecord.national_id == national_id)

    def find_by_license_number(self, license_number: str) -> Driver | None:
        return self._one(DriverRecord.license_number == license_number)

    def find_by_email(self, email: str) -> Driver | None:
        return self._one(DriverRecord.email == email)

    def update(self, driver: Driver) -> Driver:
        try:
            with get_db(self._factory) as db:
                bumped = db.execute(
                    sql_update(DriverRecord)
                    .where(DriverRecord.id == driver.id, DriverRecord.version == driver.version)
                    .values(version=DriverRecord.version + 1)
                    .execution_options(synchronize_session=False)
                ).rowcount
                if bumped == 0:
                    exists = db.execute(select(DriverRecord.id).where(DriverRecord.id == driver.id)).first()
                    if exists is None:
                        raise NotFoundError("driver")
                    raise StaleRecordError(driver.id)

                record = db.get(DriverRecord, driver.id, populate_existing=True)
                record.apply(driver)
                db.flush()
        except IntegrityError as e:
            raise self._conflict_from(e, driver) from e
        except OnboardingError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Failed to update driver {driver.id}: {e}")
            raise InfraError(f"falha ao atualizar motorista: {e}") from e

        driver.version += 1
        return driver

    def list_by_status(self, status: DriverStatus, limit: int = 50, offset: int = 0) -> list[Driver]:
        try:
            with get_db(self._factory) as db:
                rows = db.scalars(
                    select(DriverRecord)
                    .where(DriverRecord.status == status.value)
                    .order_by(DriverRecord.created_at)
                    .offset(offset)
                    .limit(limit)
                ).all()
                return [r.to_entity() for r in rows]
        except SQLAlchemyError as e:
            raise InfraError(f"falha ao listar motoristas: {e}") from e

    # ─── Helpers ─────────────────────────────────────────────

    def _one(self, condition) -> Driver | None:
        try:
            with get_db(self._factory) as db:
                record = db.scalars(select(DriverRecord).where(condition)).first()
                return record.to_entity() if record else None
        except SQLAlchemyError as e:
            raise InfraError(f"falha ao consultar motorista: {e}") from e

    def _conflict_from(self, error: IntegrityError, driver: Driver) -> ConflictError:
        """Find which unique key collided; the driver-side message varies per backend."""
        message = str(error.orig).lower()
        for column in UNIQUE_COLUMNS:
            if column in message:
                return ConflictError(column)

        for column in UNIQUE_COLUMNS:
            owner = self._one(getattr(DriverRecord, column) == getattr(driver, column))
            if owner is not None and owner.id != driver.id:
                return ConflictError(column)
        logger.warning(f"Unclassified integrity error for driver {driver.id}: {error.orig}")
        return ConflictError("id", f"motorista {driver.id} já existe")
