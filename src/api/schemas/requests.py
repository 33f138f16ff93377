"""
Pydantic schemas — Request bodies.

Field names follow the JSON contract of the mobile client (pt-BR keys).
Everything is accepted as a string: format rules live in the core, so
the API never answers with a pydantic 422 for a malformed CPF.
"""

from pydantic import BaseModel

from src.core.use_cases.register_driver import RegistrationInput


class RegisterRequest(BaseModel):
    nome: str = ""
    data_nascimento: str = ""
    cpf: str = ""
    cnh: str = ""
    categoria_cnh: str = ""
    validade_cnh: str = ""
    placa_veiculo: str = ""
    modelo_veiculo: str = ""
    telefone: str = ""
    email: str = ""
    senha: str = ""
    confirmacao_senha: str = ""

    def to_input(self) -> RegistrationInput:
        return RegistrationInput(
            name=self.nome,
            birth_date=self.data_nascimento,
            national_id=self.cpf,
            license_number=self.cnh,
            license_category=self.categoria_cnh,
            license_expiry=self.validade_cnh,
            plate=self.placa_veiculo,
            vehicle_model=self.modelo_veiculo,
            phone=self.telefone,
            email=self.email,
            password=self.senha,
            password_confirmation=self.confirmacao_senha,
        )


class LoginRequest(BaseModel):
    email: str = ""
    senha: str = ""


class UpdateProfileRequest(BaseModel):
    telefone: str | None = None
    email: str | None = None


class ChangePasswordRequest(BaseModel):
    senha_atual: str = ""
    nova_senha: str = ""
    confirmacao: str = ""


class RejectRequest(BaseModel):
    motivo: str = ""


class PasswordCheckRequest(BaseModel):
    senha: str = ""
