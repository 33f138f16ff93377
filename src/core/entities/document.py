"""
Entity: Document

Documento de suporte enviado pelo motorista (CNH, CRLV, selfie com CNH).
Modelo puro — sem dependência de framework ou banco.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocType(str, Enum):
    CNH = "CNH"
    CRLV = "CRLV"
    SELFIE_CNH = "selfie_cnh"

    @classmethod
    def normalize(cls, raw: str) -> "DocType | None":
        """
        Normaliza o tipo informado pelo cliente.

        Case-insensitive; qualquer variação contendo "selfie"
        ("Selfie com CNH", "SELFIE_CNH"...) colapsa em SELFIE_CNH.
        Retorna None para tipos não reconhecidos.
        """
        key = (raw or "").strip().upper()
        if "SELFIE" in key:
            return cls.SELFIE_CNH
        if key == "CNH":
            return cls.CNH
        if key == "CRLV":
            return cls.CRLV
        return None


# Tipos que precisam estar presentes antes da análise
REQUIRED_DOC_TYPES: tuple[DocType, ...] = (DocType.CNH, DocType.CRLV, DocType.SELFIE_CNH)


class DocStatus(str, Enum):
    PENDING = "pendente"
    APPROVED = "aprovado"


@dataclass
class Document:
    """Entidade de domínio: Documento."""
    doc_type: DocType
    file_path: str
    format: str                          # extensão em caixa alta, ex: "PDF"
    size_bytes: int
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: DocStatus = DocStatus.PENDING
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.doc_type.value,
            "filePath": self.file_path,
            "format": self.format,
            "sizeBytes": self.size_bytes,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Document":
        return cls(
            id=data["id"],
            doc_type=DocType(data["type"]),
            file_path=data["filePath"],
            format=data["format"],
            size_bytes=int(data["sizeBytes"]),
            status=DocStatus(data["status"]),
            created_at=datetime.fromisoformat(data["createdAt"]),
        )
