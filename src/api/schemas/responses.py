"""
Pydantic schemas — Response models para a API.
"""

from datetime import datetime

from pydantic import BaseModel

from src.core.entities.document import Document
from src.core.entities.driver import Driver


class DocumentResponse(BaseModel):
    id: str
    tipo_documento: str
    caminho_arquivo: str
    formato: str
    tamanho: int
    status: str
    criado_em: datetime

    @classmethod
    def from_entity(cls, doc: Document) -> "DocumentResponse":
        return cls(
            id=doc.id,
            tipo_documento=doc.doc_type.value,
            caminho_arquivo=doc.file_path,
            formato=doc.format,
            tamanho=doc.size_bytes,
            status=doc.status.value,
            criado_em=doc.created_at,
        )


class DriverSummary(BaseModel):
    id: str
    nome: str
    email: str
    status: str

    @classmethod
    def from_entity(cls, driver: Driver) -> "DriverSummary":
        return cls(id=driver.id, nome=driver.name, email=driver.email, status=driver.status.value)


class DriverDetails(BaseModel):
    id: str
    nome: str
    email: str
    telefone: str
    cpf: str
    cnh: str
    categoria_cnh: str
    validade_cnh: str
    status: str
    modelo_veiculo: str
    placa_veiculo: str
    criado_em: datetime
    atualizado_em: datetime
    documentos: list[DocumentResponse]
    documentos_pendentes: list[str]
    foto_perfil_url: str = ""

    @classmethod
    def from_entity(cls, driver: Driver) -> "DriverDetails":
        return cls(
            id=driver.id,
            nome=driver.name,
            email=driver.email,
            telefone=driver.phone,
            cpf=driver.national_id,
            cnh=driver.license_number,
            categoria_cnh=driver.license_category.value,
            validade_cnh=driver.license_expiry.strftime("%d/%m/%Y"),
            status=driver.status.value,
            modelo_veiculo=driver.vehicle_model,
            placa_veiculo=driver.plate,
            criado_em=driver.created_at,
            atualizado_em=driver.updated_at,
            documentos=[DocumentResponse.from_entity(d) for d in driver.documents],
            documentos_pendentes=[t.value for t in driver.missing_document_types()],
            foto_perfil_url=f"/api/profile/{driver.id}/photo" if driver.profile_photo_path else "",
        )


class DriverEnvelope(BaseModel):
    message: str
    motorista: DriverDetails


class LoginResponse(BaseModel):
    message: str
    motorista: DriverSummary


class UploadResponse(BaseModel):
    message: str
    status: str
    documentos: list[DocumentResponse]
    substituidos: list[str]
    em_analise: bool


class ReviewQueueResponse(BaseModel):
    total: int
    motoristas: list[DriverSummary]


class MessageResponse(BaseModel):
    message: str


class PasswordCheckResponse(BaseModel):
    forca: str
    message: str | None = None


class ErrorResponse(BaseModel):
    code: str
    message: str
