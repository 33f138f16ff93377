"""
Routes: envio de documentos, download e análise manual.

POST /documents/{id}/upload/files — multipart com `files` (até
max_batch_files) e, para cada arquivo, um campo `tipo_{i}` com
CNH | CRLV | selfie_cnh.
"""

import logging
import mimetypes
import uuid
from pathlib import Path

from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from src.api.dependencies import Services, get_services
from src.api.schemas.requests import RejectRequest
from src.api.schemas.responses import (
    DocumentResponse,
    DriverSummary,
    MessageResponse,
    ReviewQueueResponse,
    UploadResponse,
)
from src.core.entities.document import DocType
from src.core.entities.driver import Driver
from src.core.errors import (
    CapacityError,
    DuplicateDocumentTypeError,
    NotFoundError,
    OnboardingError,
    UnknownDocumentTypeError,
    ValidationError,
)
from src.core.rules.brazilian_driver_rules import MAX_FILE_BYTES, validate_document_file
from src.core.use_cases.submit_documents import DocumentUpload, SubmissionResult

logger = logging.getLogger(__name__)

router = APIRouter()

# (tipo informado, tipo normalizado, extensão, conteúdo, content type)
StagedFile = tuple[str, DocType, str, bytes, str]


@router.post("/{driver_id}/upload/files", response_model=UploadResponse)
async def upload_files(driver_id: str, request: Request, services: Services = Depends(get_services)):
    """
    Upload de 1 a 3 documentos numa requisição.

    Tipo, formato e tamanho de todos os arquivos são conferidos antes de
    gravar qualquer um. Cada arquivo ganha um nome único; arquivos que
    não ficaram ligados a um documento (lote recusado no meio ou versão
    substituída) são removidos no fim.
    """
    form = await request.form()
    files = [f for f in form.getlist("files") if isinstance(f, UploadFile)]

    if not files:
        raise ValidationError(
            "files", "required", "nenhum arquivo enviado",
            code="validation.campo_obrigatorio",
        )
    if len(files) > services.max_batch_files:
        raise CapacityError(
            services.max_batch_files,
            f"máximo de {services.max_batch_files} arquivos",
            code="upload.limite_arquivos",
        )
    before = await run_in_threadpool(services.profile.get, driver_id)

    # ── 1. Valida o lote inteiro ──
    staged: list[StagedFile] = []
    seen: set[DocType] = set()
    for idx, upload_file in enumerate(files):
        raw_type = form.get(f"tipo_{idx}")
        if not isinstance(raw_type, str) or not raw_type.strip():
            raise ValidationError(
                f"tipo_{idx}", "required", f"tipo_{idx} é obrigatório",
                code="validation.campo_obrigatorio",
            )
        doc_type = DocType.normalize(raw_type)
        if doc_type is None:
            raise UnknownDocumentTypeError(raw_type)
        if doc_type in seen:
            raise DuplicateDocumentTypeError(doc_type.value)
        seen.add(doc_type)

        ext = Path(upload_file.filename or "").suffix.lower()
        data = await upload_file.read(MAX_FILE_BYTES + 1)
        validate_document_file(ext, len(data))
        staged.append((raw_type, doc_type, ext, data, upload_file.content_type or "application/octet-stream"))

    # ── 2. Grava e registra ──
    result = await run_in_threadpool(_store_batch, services, driver_id, before, staged)
    driver = result.driver
    logger.info(f"Upload of {len(staged)} files for driver {driver_id}, status={driver.status.value}")

    return UploadResponse(
        message="Arquivos enviados",
        status=driver.status.value,
        documentos=[DocumentResponse.from_entity(d) for d in driver.documents],
        substituidos=[t.value for t in result.replaced],
        em_analise=result.moved_to_review,
    )


@router.get("/review-queue", response_model=ReviewQueueResponse)
def review_queue(limit: int = 50, offset: int = 0, services: Services = Depends(get_services)):
    """Motoristas em "documentos_em_analise", mais antigos primeiro."""
    drivers = services.review.review_queue(limit=limit, offset=offset)
    return ReviewQueueResponse(
        total=len(drivers),
        motoristas=[DriverSummary.from_entity(d) for d in drivers],
    )


@router.get("/{driver_id}/file/{doc_type}")
def download_document(driver_id: str, doc_type: str, services: Services = Depends(get_services)):
    document = services.documents.find_document(driver_id, doc_type)
    if not services.storage.exists(document.file_path):
        raise NotFoundError("file")
    content = services.storage.read(document.file_path)
    media_type, _ = mimetypes.guess_type(document.file_path)
    return Response(content=content, media_type=media_type or "application/octet-stream")


@router.put("/{driver_id}/approve", response_model=MessageResponse)
def approve(driver_id: str, services: Services = Depends(get_services)):
    services.review.approve(driver_id)
    return MessageResponse(message="Motorista aprovado com sucesso")


@router.put("/{driver_id}/reject", response_model=MessageResponse)
def reject(driver_id: str, req: RejectRequest, services: Services = Depends(get_services)):
    services.review.reject(driver_id, req.motivo)
    return MessageResponse(message="Motorista rejeitado")


def _discard_unreferenced(services: Services, driver: Driver, paths: list[str]) -> None:
    """Remove os arquivos de `paths` que nenhum documento do motorista usa."""
    referenced = {d.file_path for d in driver.documents}
    for path in paths:
        if path not in referenced:
            services.storage.delete(path)
            logger.info(f"Discarded unreferenced upload {path}")


def _store_batch(services: Services, driver_id: str, before: Driver, staged: list[StagedFile]) -> SubmissionResult:
    uploads: list[DocumentUpload] = []
    for raw_type, doc_type, ext, data, content_type in staged:
        ref = services.storage.save(
            driver_id, f"{doc_type.value}-{uuid.uuid4().hex[:8]}{ext}", data,
            content_type=content_type,
        )
        uploads.append(DocumentUpload(
            doc_type=raw_type,
            file_path=ref.path,
            format=ext.lstrip("."),
            size_bytes=ref.size_bytes,
        ))

    candidates = [u.file_path for u in uploads] + [d.file_path for d in before.documents]
    try:
        result = services.documents.execute(driver_id, uploads)
    except OnboardingError:
        _discard_unreferenced(services, services.profile.get(driver_id), candidates)
        raise
    _discard_unreferenced(services, result.driver, candidates)
    return result
