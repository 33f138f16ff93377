"""
Routes: cadastro, login, perfil e encerramento de conta.
"""

import mimetypes
import uuid
from pathlib import Path

from fastapi import APIRouter, Depends, File, Response, UploadFile
from fastapi.concurrency import run_in_threadpool

from src.api.dependencies import Services, get_services
from src.api.schemas.requests import (
    ChangePasswordRequest,
    LoginRequest,
    PasswordCheckRequest,
    RegisterRequest,
    UpdateProfileRequest,
)
from src.api.schemas.responses import (
    DriverDetails,
    DriverEnvelope,
    DriverSummary,
    LoginResponse,
    MessageResponse,
    PasswordCheckResponse,
)
from src.core.errors import NotFoundError, OnboardingError, WeakPasswordError
from src.core.rules.brazilian_driver_rules import (
    MAX_FILE_BYTES,
    PasswordStrength,
    check_password_strength,
    validate_profile_photo,
)

router = APIRouter()


# ── Auth ──

@router.post("/auth/register", response_model=DriverEnvelope, status_code=201)
def register(req: RegisterRequest, services: Services = Depends(get_services)):
    """Cadastra o motorista em "aguardando_documentos"."""
    driver = services.register.execute(req.to_input())
    return DriverEnvelope(
        message="Motorista cadastrado com sucesso",
        motorista=DriverDetails.from_entity(driver),
    )


@router.post("/auth/login", response_model=LoginResponse)
def login(req: LoginRequest, services: Services = Depends(get_services)):
    driver = services.authenticate.execute(req.email, req.senha)
    return LoginResponse(message="Login realizado com sucesso", motorista=DriverSummary.from_entity(driver))


# ── Profile ──

@router.get("/profile/{driver_id}", response_model=DriverEnvelope)
def get_profile(driver_id: str, services: Services = Depends(get_services)):
    driver = services.profile.get(driver_id)
    return DriverEnvelope(message="ok", motorista=DriverDetails.from_entity(driver))


@router.put("/profile/{driver_id}", response_model=DriverEnvelope)
def update_profile(driver_id: str, req: UpdateProfileRequest, services: Services = Depends(get_services)):
    driver = services.profile.update_contact(driver_id, phone=req.telefone, email=req.email)
    return DriverEnvelope(
        message="Perfil atualizado com sucesso",
        motorista=DriverDetails.from_entity(driver),
    )


@router.put("/profile/{driver_id}/password", response_model=MessageResponse)
def change_password(driver_id: str, req: ChangePasswordRequest, services: Services = Depends(get_services)):
    services.profile.change_password(driver_id, req.senha_atual, req.nova_senha, req.confirmacao)
    return MessageResponse(message="Senha alterada com sucesso")


@router.post("/profile/{driver_id}/photo", response_model=DriverEnvelope)
async def upload_photo(driver_id: str, foto: UploadFile = File(...), services: Services = Depends(get_services)):
    """
    Substitui a foto de perfil (JPG/JPEG/PNG/WEBP, até 5 MiB).

    A foto é validada antes de gravar e recebe um nome novo a cada envio,
    então um envio rejeitado não toca na foto atual.
    """
    previous = (await run_in_threadpool(services.profile.get, driver_id)).profile_photo_path

    ext = Path(foto.filename or "").suffix.lower()
    data = await foto.read(MAX_FILE_BYTES + 1)
    validate_profile_photo(ext, len(data))

    driver = await run_in_threadpool(
        _store_photo, services, driver_id, ext, data,
        foto.content_type or "application/octet-stream", previous,
    )
    return DriverEnvelope(
        message="Foto de perfil atualizada com sucesso",
        motorista=DriverDetails.from_entity(driver),
    )


@router.get("/profile/{driver_id}/photo")
def get_photo(driver_id: str, services: Services = Depends(get_services)):
    driver = services.profile.get(driver_id)
    if not driver.profile_photo_path:
        raise NotFoundError("photo")
    return _file_response(services, driver.profile_photo_path)


@router.post("/profile/{driver_id}/request-deletion", response_model=MessageResponse)
def request_deletion(driver_id: str, services: Services = Depends(get_services)):
    services.account.request_deletion(driver_id)
    return MessageResponse(message="Solicitação de exclusão registrada")


@router.post("/profile/{driver_id}/confirm-deletion", response_model=MessageResponse)
def confirm_deletion(driver_id: str, services: Services = Depends(get_services)):
    services.account.confirm_deletion(driver_id)
    return MessageResponse(message="Sua conta foi encerrada e será excluída permanentemente em 72h")


# ── Utils ──

@router.post("/utils/check-password", response_model=PasswordCheckResponse)
async def check_password(req: PasswordCheckRequest):
    """Força da senha sem cadastrar nada; senha fraca vem com o motivo."""
    try:
        strength = check_password_strength(req.senha)
    except WeakPasswordError as e:
        return PasswordCheckResponse(forca=PasswordStrength.WEAK.value, message=e.message)
    return PasswordCheckResponse(forca=strength.value)


def _file_response(services: Services, path: str) -> Response:
    content = services.storage.read(path)
    media_type, _ = mimetypes.guess_type(path)
    return Response(content=content, media_type=media_type or "application/octet-stream")


def _store_photo(services: Services, driver_id: str, ext: str, data: bytes, content_type: str, previous: str | None):
    ref = services.storage.save(driver_id, f"foto-{uuid.uuid4().hex[:8]}{ext}", data, content_type=content_type)
    try:
        driver = services.profile.replace_photo(driver_id, ref.path, ext.lstrip("."), ref.size_bytes)
    except OnboardingError:
        services.storage.delete(ref.path)
        raise

    if previous and previous != ref.path:
        services.storage.delete(previous)
    return driver
