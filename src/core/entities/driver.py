"""
Entity: Driver

Agregado do onboarding: dados pessoais, CNH, veículo, documentos
e o status no ciclo de aprovação. Toda mudança de status passa por
`transition_to`, que conhece a tabela de transições legais.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from src.core.entities.document import Document, DocStatus, DocType, REQUIRED_DOC_TYPES, utcnow
from src.core.errors import InvalidTransitionError


class DriverStatus(str, Enum):
    PENDING_DOCUMENTS = "aguardando_documentos"
    IN_REVIEW = "documentos_em_analise"
    APPROVED = "aprovado"
    REJECTED = "documentos_rejeitados"
    DELETION_REQUESTED = "aguardando_exclusao"
    CLOSED = "encerrado"


class LicenseCategory(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    AB = "AB"
    AC = "AC"
    AD = "AD"
    AE = "AE"


_S = DriverStatus

LEGAL_TRANSITIONS: dict[DriverStatus, frozenset[DriverStatus]] = {
    _S.PENDING_DOCUMENTS: frozenset({_S.IN_REVIEW, _S.REJECTED, _S.DELETION_REQUESTED, _S.CLOSED}),
    _S.IN_REVIEW: frozenset({_S.APPROVED, _S.REJECTED, _S.DELETION_REQUESTED, _S.CLOSED}),
    _S.APPROVED: frozenset({_S.REJECTED, _S.DELETION_REQUESTED, _S.CLOSED}),
    _S.REJECTED: frozenset({_S.APPROVED, _S.DELETION_REQUESTED, _S.CLOSED}),
    _S.DELETION_REQUESTED: frozenset({_S.CLOSED}),
    _S.CLOSED: frozenset(),
}


@dataclass
class Driver:
    """Entidade de domínio: Motorista."""
    id: str
    name: str
    birth_date: date
    national_id: str                     # CPF, só dígitos
    license_number: str                  # CNH, só dígitos
    license_category: LicenseCategory
    license_expiry: date
    plate: str
    vehicle_model: str
    phone: str
    email: str
    password_hash: str
    status: DriverStatus = DriverStatus.PENDING_DOCUMENTS
    profile_photo_path: str | None = None
    documents: list[Document] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime | None = None
    version: int = 0                     # controle de concorrência otimista (stores)

    def __post_init__(self):
        if self.updated_at is None:
            self.updated_at = self.created_at

    # ─── Status ──────────────────────────────────────────────

    def can_transition_to(self, target: DriverStatus) -> bool:
        return target in LEGAL_TRANSITIONS[self.status]

    def transition_to(self, target: DriverStatus) -> None:
        if not self.can_transition_to(target):
            raise InvalidTransitionError(self.status.value, target.value)
        self.status = target
        self.touch()

    def touch(self) -> None:
        now = utcnow()
        self.updated_at = max(now, self.created_at)

    # ─── Documentos ──────────────────────────────────────────

    def document_of(self, doc_type: DocType) -> Document | None:
        for doc in self.documents:
            if doc.doc_type == doc_type:
                return doc
        return None

    def put_document(self, document: Document) -> bool:
        """
        Substitui no mesmo slot o documento do mesmo tipo, ou adiciona ao final.

        Returns:
            True se substituiu um documento existente.
        """
        self.touch()
        for i, doc in enumerate(self.documents):
            if doc.doc_type == document.doc_type:
                self.documents[i] = document
                return True
        self.documents.append(document)
        return False

    def missing_document_types(self) -> list[DocType]:
        present = {doc.doc_type for doc in self.documents}
        return [t for t in REQUIRED_DOC_TYPES if t not in present]

    def has_all_required_documents(self) -> bool:
        return not self.missing_document_types()

    def approve_documents(self) -> None:
        for doc in self.documents:
            doc.status = DocStatus.APPROVED
        self.touch()

    # ─── Serialização ────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "birthDate": self.birth_date.isoformat(),
            "nationalId": self.national_id,
            "licenseNumber": self.license_number,
            "licenseCategory": self.license_category.value,
            "licenseExpiry": self.license_expiry.isoformat(),
            "plate": self.plate,
            "vehicleModel": self.vehicle_model,
            "phone": self.phone,
            "email": self.email,
            "passwordHash": self.password_hash,
            "status": self.status.value,
            "profilePhotoPath": self.profile_photo_path,
            "documents": [d.to_dict() for d in self.documents],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Driver":
        return cls(
            id=data["id"],
            name=data["name"],
            birth_date=date.fromisoformat(data["birthDate"]),
            national_id=data["nationalId"],
            license_number=data["licenseNumber"],
            license_category=LicenseCategory(data["licenseCategory"]),
            license_expiry=date.fromisoformat(data["licenseExpiry"]),
            plate=data["plate"],
            vehicle_model=data["vehicleModel"],
            phone=data["phone"],
            email=data["email"],
            password_hash=data["passwordHash"],
            status=DriverStatus(data["status"]),
            profile_photo_path=data.get("profilePhotoPath"),
            documents=[Document.from_dict(d) for d in data.get("documents", [])],
            created_at=datetime.fromisoformat(data["createdAt"]),
            updated_at=datetime.fromisoformat(data["updatedAt"]),
            version=int(data.get("version", 0)),
        )
