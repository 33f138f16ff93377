"""
Domain Errors

Taxonomia de erros do onboarding. Cada erro carrega um `code` estável
(consumido pelos clientes) e uma mensagem em pt-BR. A tradução para
HTTP acontece apenas na borda (src/api).
"""


class OnboardingError(Exception):
    """Base de todos os erros de negócio."""

    code = "internal.erro"
    default_message = "erro interno"

    def __init__(self, message: str | None = None, code: str | None = None):
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)

    def to_payload(self) -> dict:
        return {"code": self.code, "message": self.message}


# ── Validação ──────────────────────────────────────────────

class ValidationError(OnboardingError):
    """Campo mal formado ou regra de negócio violada."""

    code = "validation.invalido"
    default_message = "dados inválidos"

    def __init__(self, field: str, rule: str, message: str | None = None, code: str | None = None):
        self.field = field
        self.rule = rule
        super().__init__(message, code or f"validation.{field}.{rule}")


class WeakPasswordError(ValidationError):
    def __init__(self, message: str | None = None):
        super().__init__(
            "password", "weak",
            message or "senha deve ter pelo menos 8 caracteres, incluindo maiúscula, minúscula, número e símbolo",
            code="senha.fraca",
        )


class PasswordMismatchError(ValidationError):
    def __init__(self, field: str = "password_confirmation"):
        super().__init__(field, "mismatch", "senhas não conferem", code="motorista.senhas_nao_conferem")


class UnknownDocumentTypeError(ValidationError):
    def __init__(self, doc_type: str):
        self.doc_type = doc_type
        super().__init__(
            "document_type", "unknown",
            f"tipo de documento inválido: {doc_type}",
            code="documento.tipo_invalido",
        )


class DuplicateDocumentTypeError(ValidationError):
    def __init__(self, doc_type: str):
        self.doc_type = doc_type
        super().__init__(
            "document_type", "duplicate_in_batch",
            f"tipo de documento duplicado na mesma requisição: {doc_type}",
            code="documento.duplicado_batch",
        )


class PendingDocumentsError(ValidationError):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            "documents", "pending",
            f"documentos obrigatórios pendentes: {', '.join(missing)}",
            code="documento.obrigatorios_pendentes",
        )


class FormatError(OnboardingError):
    """Formato inválido de data ou de arquivo."""

    code = "validation.formato"
    default_message = "formato inválido"

    def __init__(self, field: str, message: str | None = None, code: str | None = None):
        self.field = field
        super().__init__(message, code or f"validation.{field}_formato")


class CapacityError(OnboardingError):
    """Limite excedido (tamanho de arquivo, quantidade de arquivos)."""

    code = "upload.limite"
    default_message = "limite excedido"

    def __init__(self, limit: int, message: str | None = None, code: str | None = None):
        self.limit = limit
        super().__init__(message, code)


# ── Estado / identidade ────────────────────────────────────

class ConflictError(OnboardingError):
    """Violação de unicidade (CPF, CNH ou e-mail)."""

    MESSAGES = {
        "national_id": ("motorista.cpf_ja_cadastrado", "CPF já cadastrado"),
        "license_number": ("motorista.cnh_ja_cadastrada", "CNH já cadastrada"),
        "email": ("motorista.email_ja_cadastrado", "e-mail já cadastrado"),
    }

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        code, default = self.MESSAGES.get(key, ("motorista.conflito", f"conflito em {key}"))
        super().__init__(message or default, code)


class StaleRecordError(ConflictError):
    """Escrita condicional falhou: o registro mudou desde a leitura."""

    def __init__(self, driver_id: str):
        self.driver_id = driver_id
        super().__init__("version", f"registro {driver_id} foi alterado concorrentemente")
        self.code = "motorista.versao_desatualizada"


class NotFoundError(OnboardingError):
    MESSAGES = {
        "driver": ("motorista.nao_encontrado", "motorista não encontrado"),
        "document": ("documento.nao_encontrado", "documento não encontrado"),
        "file": ("arquivo.nao_encontrado", "arquivo não encontrado"),
        "photo": ("foto.nao_encontrada", "foto não encontrada"),
    }

    def __init__(self, entity: str, message: str | None = None):
        self.entity = entity
        code, default = self.MESSAGES.get(entity, (f"{entity}.nao_encontrado", f"{entity} não encontrado"))
        super().__init__(message or default, code)


class AuthError(OnboardingError):
    code = "motorista.credenciais_invalidas"
    default_message = "credenciais inválidas"


class InvalidTransitionError(OnboardingError):
    code = "motorista.transicao_invalida"

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"transição de status inválida: {current} -> {target}")


class InfraError(OnboardingError):
    """Falha de armazenamento / filesystem. Sempre encadeada à causa original."""

    code = "infra.erro"
    default_message = "falha de infraestrutura"
