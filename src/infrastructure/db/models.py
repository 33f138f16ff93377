"""
Database Models — SQLAlchemy.

Tables:
  - drivers: one row per driver; CPF, CNH and e-mail carry UNIQUE
    constraints so duplicate registrations fail at write time.
  - driver_documents: one row per (driver, document type), ordered
    by `position`.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Date, DateTime, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship

from src.core.entities.document import Document, DocStatus, DocType
from src.core.entities.driver import Driver, DriverStatus, LicenseCategory


class Base(DeclarativeBase):
    pass


def _as_utc(value: datetime) -> datetime:
    # SQLite devolve datetimes sem fuso
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class DriverRecord(Base):
    """Stores every registered driver."""
    __tablename__ = "drivers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    birth_date = Column(Date, nullable=False)
    national_id = Column(String(11), nullable=False, unique=True)
    license_number = Column(String(11), nullable=False, unique=True)
    license_category = Column(String(2), nullable=False)
    license_expiry = Column(Date, nullable=False)
    plate = Column(String(7), nullable=False)
    vehicle_model = Column(String(100), nullable=False)
    phone = Column(String(11), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    status = Column(String(30), nullable=False, index=True)
    profile_photo_path = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    version = Column(Integer, nullable=False, default=1)

    documents = relationship(
        "DocumentRecord",
        back_populates="driver",
        order_by="DocumentRecord.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Driver {self.id} [{self.status}] v{self.version}>"

    @classmethod
    def from_entity(cls, driver: Driver) -> "DriverRecord":
        record = cls(id=driver.id, created_at=driver.created_at, version=driver.version)
        record.apply(driver)
        return record

    def apply(self, driver: Driver) -> None:
        """Copy every mutable field (documents included) from the entity."""
        self.name = driver.name
        self.birth_date = driver.birth_date
        self.national_id = driver.national_id
        self.license_number = driver.license_number
        self.license_category = driver.license_category.value
        self.license_expiry = driver.license_expiry
        self.plate = driver.plate
        self.vehicle_model = driver.vehicle_model
        self.phone = driver.phone
        self.email = driver.email
        self.password_hash = driver.password_hash
        self.status = driver.status.value
        self.profile_photo_path = driver.profile_photo_path
        self.updated_at = driver.updated_at

        # Rows are updated in place by type so UNIQUE(driver_id, doc_type)
        # never sees a transient duplicate during flush.
        existing = {d.doc_type: d for d in self.documents}
        kept = []
        for position, doc in enumerate(driver.documents):
            row = existing.pop(doc.doc_type.value, None) or DocumentRecord(doc_type=doc.doc_type.value)
            row.apply(doc, position)
            kept.append(row)
        self.documents = kept

    def to_entity(self) -> Driver:
        return Driver(
            id=self.id,
            name=self.name,
            birth_date=self.birth_date,
            national_id=self.national_id,
            license_number=self.license_number,
            license_category=LicenseCategory(self.license_category),
            license_expiry=self.license_expiry,
            plate=self.plate,
            vehicle_model=self.vehicle_model,
            phone=self.phone,
            email=self.email,
            password_hash=self.password_hash,
            status=DriverStatus(self.status),
            profile_photo_path=self.profile_photo_path,
            documents=[d.to_entity() for d in self.documents],
            created_at=_as_utc(self.created_at),
            updated_at=_as_utc(self.updated_at),
            version=self.version,
        )


class DocumentRecord(Base):
    """One slot per document type of a driver."""
    __tablename__ = "driver_documents"
    __table_args__ = (UniqueConstraint("driver_id", "doc_type", name="uq_driver_doc_type"),)

    pk = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(String(36), nullable=False, unique=True)
    driver_id = Column(String(36), ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False, index=True)
    doc_type = Column(String(20), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    file_path = Column(String(500), nullable=False)
    format = Column(String(10), nullable=False)
    size_bytes = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    driver = relationship("DriverRecord", back_populates="documents")

    def __repr__(self):
        return f"<Document {self.doc_type} driver={self.driver_id} [{self.status}]>"

    def apply(self, doc: Document, position: int) -> None:
        self.document_id = doc.id
        self.doc_type = doc.doc_type.value
        self.position = position
        self.file_path = doc.file_path
        self.format = doc.format
        self.size_bytes = doc.size_bytes
        self.status = doc.status.value
        self.created_at = doc.created_at

    def to_entity(self) -> Document:
        return Document(
            id=self.document_id,
            doc_type=DocType(self.doc_type),
            file_path=self.file_path,
            format=self.format,
            size_bytes=self.size_bytes,
            status=DocStatus(self.status),
            created_at=_as_utc(self.created_at),
        )
