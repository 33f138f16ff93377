"""
Use Case: Submit Documents — envio individual e em lote.

Fluxo por documento:
  formato/tamanho → normalização do tipo → motorista → substitui ou
  adiciona → checagem de completude → persistência → (notificação)

Em lote, cada documento é gravado separadamente, na ordem recebida:
se o 3º falhar, o 1º e o 2º continuam aplicados.
"""

import logging
from dataclasses import dataclass

from src.core.concurrency import DriverLocks
from src.core.entities.document import Document, DocType
from src.core.entities.driver import Driver, DriverStatus
from src.core.errors import (
    CapacityError,
    DuplicateDocumentTypeError,
    NotFoundError,
    UnknownDocumentTypeError,
    ValidationError,
)
from src.core.interfaces.driver_repository import IDriverRepository
from src.core.interfaces.notifier import INotifier
from src.core.rules.brazilian_driver_rules import validate_document_file
from src.core.use_cases._notify import notify_safely

logger = logging.getLogger(__name__)

DEFAULT_MAX_BATCH_FILES = 3


@dataclass
class DocumentUpload:
    """Um arquivo já gravado pelo storage, aguardando registro."""
    doc_type: str               # como veio do cliente: "cnh", "Selfie com CNH"...
    file_path: str
    format: str                 # extensão: "pdf", ".PNG"...
    size_bytes: int


@dataclass
class SubmissionResult:
    driver: Driver
    replaced: list[DocType]
    moved_to_review: bool


class SubmitDocumentsUseCase:
    """
    Use Case: registra documentos do motorista e dispara a passagem
    para "documentos_em_analise" quando o conjunto obrigatório fica
    completo.
    """

    def __init__(
        self,
        repository: IDriverRepository,
        notifier: INotifier,
        locks: DriverLocks | None = None,
        max_batch_files: int = DEFAULT_MAX_BATCH_FILES,
    ):
        self._repo = repository
        self._notifier = notifier
        self._locks = locks or DriverLocks()
        self._max_batch_files = max_batch_files

    def execute(self, driver_id: str, uploads: list[DocumentUpload]) -> SubmissionResult:
        """
        Envia de 1 a `max_batch_files` documentos.

        Tipos duplicados (após normalização) rejeitam o lote inteiro
        antes de qualquer gravação.
        """
        if not uploads:
            raise ValidationError(
                "documents", "empty", "nenhum documento enviado",
                code="documento.nenhum_enviado",
            )
        if len(uploads) > self._max_batch_files:
            raise CapacityError(
                self._max_batch_files,
                f"máximo de {self._max_batch_files} arquivos",
                code="upload.limite_arquivos",
            )

        seen: set[str] = set()
        for upload in uploads:
            if not (upload.doc_type or "").strip():
                raise ValidationError(
                    "document_type", "required", "tipo de documento vazio",
                    code="validation.campo_obrigatorio",
                )
            normalized = DocType.normalize(upload.doc_type)
            key = normalized.value if normalized else upload.doc_type.strip().upper()
            if key in seen:
                raise DuplicateDocumentTypeError(key)
            seen.add(key)

        with self._locks.hold(driver_id):
            result = None
            replaced: list[DocType] = []
            moved = False
            for upload in uploads:
                result = self._submit_locked(driver_id, upload)
                replaced.extend(result.replaced)
                moved = moved or result.moved_to_review

        logger.info(f"Batch of {len(uploads)} documents stored for driver {driver_id}")
        return SubmissionResult(driver=result.driver, replaced=replaced, moved_to_review=moved)

    def submit_one(self, driver_id: str, upload: DocumentUpload) -> SubmissionResult:
        with self._locks.hold(driver_id):
            return self._submit_locked(driver_id, upload)

    def find_document(self, driver_id: str, doc_type: str) -> Document:
        """
        Raises:
            NotFoundError: motorista inexistente ou documento não enviado.
        """
        driver = self._repo.get_by_id(driver_id)
        normalized = DocType.normalize(doc_type)
        document = driver.document_of(normalized) if normalized else None
        if document is None:
            raise NotFoundError("document")
        return document

    # ─── Internals ──────────────────────────────────────────

    def _submit_locked(self, driver_id: str, upload: DocumentUpload) -> SubmissionResult:
        fmt = validate_document_file(upload.format, upload.size_bytes)

        doc_type = DocType.normalize(upload.doc_type)
        if doc_type is None:
            raise UnknownDocumentTypeError(upload.doc_type)

        driver = self._repo.get_by_id(driver_id)

        document = Document(
            doc_type=doc_type,
            file_path=upload.file_path,
            format=fmt,
            size_bytes=upload.size_bytes,
        )
        was_replaced = driver.put_document(document)

        moved = False
        if driver.has_all_required_documents() and driver.status == DriverStatus.PENDING_DOCUMENTS:
            driver.transition_to(DriverStatus.IN_REVIEW)
            moved = True

        driver = self._repo.update(driver)

        action = "replaced" if was_replaced else "added"
        logger.info(f"Document {doc_type.value} {action} for driver {driver_id}")

        if moved:
            logger.info(f"Driver {driver_id} moved to {DriverStatus.IN_REVIEW.value}")
            notify_safely(
                "documents_received",
                self._notifier.notify_documents_received,
                driver.email, driver.name,
            )

        return SubmissionResult(
            driver=driver,
            replaced=[doc_type] if was_replaced else [],
            moved_to_review=moved,
        )
