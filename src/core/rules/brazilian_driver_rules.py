"""
Rules: Brazilian Driver Rules

Validadores determinísticos para o cadastro de motoristas brasileiros.
Cada regra é uma função pura — fácil de adicionar/remover/testar.

Regras implementadas:
    1. CPF — 11 dígitos, não repetidos, dígitos verificadores (mod 11)
    2. CNH — 11 dígitos
    3. Placa — formato antigo (ABC1234) ou Mercosul (ABC1D23)
    4. Telefone — DDD + 8 dígitos, ou DDD + 9 dígitos começando em 9
    5. E-mail — local@dominio.tld
    6. Idade — mínimo 18 anos
    7. Validade da CNH — não vencida
    8. Força da senha — 8+ caracteres e as 4 classes
    9. Documento / foto — formato e tamanho (5 MiB)

Toda violação levanta um erro tipado (ver src/core/errors.py);
nenhuma regra devolve falha genérica.
"""

import re
from datetime import date, datetime
from enum import Enum

from src.core.entities.driver import LicenseCategory
from src.core.errors import CapacityError, FormatError, ValidationError, WeakPasswordError


# ── Padrões (compilados uma vez, no import) ────────────────

NON_DIGITS = re.compile(r"\D", re.ASCII)
ELEVEN_DIGITS = re.compile(r"^\d{11}$", re.ASCII)
PLATE_LEGACY = re.compile(r"^[A-Z]{3}\d{4}$", re.ASCII)
PLATE_MERCOSUL = re.compile(r"^[A-Z]{3}\d[A-Z]\d{2}$", re.ASCII)
PHONE = re.compile(r"^[1-9]{2}(9\d{8}|\d{8})$", re.ASCII)
EMAIL = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

HAS_UPPER = re.compile(r"[A-Z]")
HAS_LOWER = re.compile(r"[a-z]")
HAS_DIGIT = re.compile(r"\d", re.ASCII)
HAS_SYMBOL = re.compile(r"[^A-Za-z0-9\s]")

MAX_FILE_BYTES = 5 * 1024 * 1024
DOCUMENT_FORMATS = frozenset({"JPG", "JPEG", "PNG", "PDF"})
PHOTO_FORMATS = frozenset({"JPG", "JPEG", "PNG", "WEBP"})

MIN_PASSWORD_LENGTH = 8
STRONG_PASSWORD_LENGTH = 12
MIN_DRIVER_AGE = 18

BR_DATE_FORMAT = "%d/%m/%Y"


class PasswordStrength(str, Enum):
    WEAK = "fraca"
    MEDIUM = "media"
    STRONG = "forte"


# ─── Sanitização ────────────────────────────────────────────

def only_digits(value: str | None) -> str:
    return NON_DIGITS.sub("", value or "")


def normalize_plate(value: str | None) -> str:
    return (value or "").strip().upper().replace("-", "")


def normalize_email(value: str | None) -> str:
    return (value or "").strip().lower()


def normalize_format(value: str | None) -> str:
    """'.pdf' / 'pdf' / 'PDF' → 'PDF'."""
    return (value or "").strip().lstrip(".").upper()


# ─── Identidade ─────────────────────────────────────────────

def validate_national_id(cpf: str) -> None:
    """Regra 1: CPF com dígitos verificadores válidos."""
    if not cpf:
        raise ValidationError("national_id", "required", "CPF é obrigatório")
    if not ELEVEN_DIGITS.match(cpf):
        raise ValidationError("national_id", "format", "CPF deve ter 11 dígitos", code="validation.cpf_invalido")

    # Rejeita CPFs com todos os dígitos iguais
    if cpf == cpf[0] * 11:
        raise ValidationError("national_id", "repeated_digits", "CPF inválido", code="validation.cpf_invalido")

    if not _validate_cpf_digits(cpf):
        raise ValidationError("national_id", "checksum", "CPF inválido", code="validation.cpf_invalido")


def validate_license_number(cnh: str) -> None:
    """Regra 2: CNH com 11 dígitos."""
    if not ELEVEN_DIGITS.match(cnh or ""):
        raise ValidationError("license_number", "format", "CNH deve ter 11 dígitos", code="validation.cnh_invalida")


def validate_license_category(category: str) -> LicenseCategory:
    try:
        return LicenseCategory((category or "").strip().upper())
    except ValueError:
        raise ValidationError(
            "license_category", "invalid_choice",
            f"categoria de CNH inválida: {category}",
        ) from None


# ─── Veículo / contato ──────────────────────────────────────

def validate_plate(plate: str) -> None:
    """Regra 3: placa no formato antigo ou Mercosul."""
    normalized = normalize_plate(plate)
    if PLATE_LEGACY.match(normalized) or PLATE_MERCOSUL.match(normalized):
        return
    raise ValidationError("plate", "format", "formato de placa inválido", code="validation.placa_invalida")


def validate_phone(phone: str) -> None:
    """Regra 4: só dígitos, DDD + número."""
    if not PHONE.match(phone or ""):
        raise ValidationError("phone", "format", "formato de telefone inválido", code="validation.telefone_invalido")


def validate_email(email: str) -> None:
    """Regra 5: formato local@dominio.tld."""
    if not EMAIL.match(email or ""):
        raise ValidationError("email", "format", "formato de email inválido", code="validation.email_invalido")


def validate_text_length(field_name: str, value: str, min_len: int, max_len: int) -> None:
    if not (min_len <= len(value) <= max_len):
        raise ValidationError(
            field_name, "length",
            f"{field_name} deve ter entre {min_len} e {max_len} caracteres",
        )


# ─── Datas ──────────────────────────────────────────────────

def parse_br_date(value: str, field_name: str) -> date:
    """Parseia DD/MM/AAAA; formato inválido vira FormatError do campo."""
    try:
        return datetime.strptime((value or "").strip(), BR_DATE_FORMAT).date()
    except ValueError:
        raise FormatError(
            field_name,
            f"formato de {field_name} inválido. Use DD/MM/AAAA",
        ) from None


def compute_age(birth_date: date, today: date | None = None) -> int:
    """
    Idade em anos completos.

    O aniversário é decidido pelo dia do ano (não por mês/dia),
    o que desloca um dia perto de anos bissextos.
    """
    today = today or date.today()
    age = today.year - birth_date.year
    if today.timetuple().tm_yday < birth_date.timetuple().tm_yday:
        age -= 1
    return age


def validate_age(birth_date: date, today: date | None = None) -> None:
    """Regra 6: motorista com pelo menos 18 anos."""
    if compute_age(birth_date, today) < MIN_DRIVER_AGE:
        raise ValidationError(
            "birth_date", "underage",
            "motorista deve ter pelo menos 18 anos",
            code="validation.menor_idade",
        )


def validate_license_expiry(expiry: date, today: date | None = None) -> None:
    """Regra 7: CNH não pode ter vencido antes do início do dia de hoje."""
    today = today or date.today()
    if expiry < today:
        raise ValidationError(
            "license_expiry", "expired",
            "CNH vencida. Renove sua CNH para prosseguir",
            code="validation.cnh_vencida",
        )


# ─── Senha ──────────────────────────────────────────────────

def check_password_strength(password: str) -> PasswordStrength:
    """
    Regra 8: força da senha.

    O score e o gate de aceitação são a mesma verificação: com menos
    das 4 classes (maiúscula, minúscula, dígito, símbolo) a senha é
    rejeitada. Com as 4, 12+ caracteres é forte, senão média.
    """
    password = password or ""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError()

    criteria = sum(
        1 for pattern in (HAS_UPPER, HAS_LOWER, HAS_DIGIT, HAS_SYMBOL)
        if pattern.search(password)
    )
    if criteria < 4:
        raise WeakPasswordError()

    if len(password) >= STRONG_PASSWORD_LENGTH:
        return PasswordStrength.STRONG
    return PasswordStrength.MEDIUM


# ─── Arquivos ───────────────────────────────────────────────

def validate_document_file(file_format: str, size_bytes: int) -> str:
    """
    Regra 9a: documento JPG/JPEG/PNG/PDF até 5 MiB.

    Returns:
        Formato normalizado (caixa alta, sem ponto).
    """
    fmt = normalize_format(file_format)
    if fmt not in DOCUMENT_FORMATS:
        raise FormatError(
            "document", "formato não suportado. Use JPG, PNG ou PDF",
            code="validation.documento_formato",
        )
    _check_size(size_bytes, "arquivo muito grande. Tamanho máximo: 5MB", "validation.documento_tamanho")
    return fmt


def validate_profile_photo(file_format: str, size_bytes: int) -> str:
    """Regra 9b: foto de perfil JPG/JPEG/PNG/WEBP até 5 MiB."""
    fmt = normalize_format(file_format)
    if fmt not in PHOTO_FORMATS:
        raise FormatError(
            "photo", "formato de foto não suportado. Use JPG, JPEG, PNG ou WEBP",
            code="validation.foto_formato",
        )
    _check_size(size_bytes, "foto muito grande. Tamanho máximo: 5MB", "validation.foto_tamanho")
    return fmt


# ─── Helpers ────────────────────────────────────────────────

def _check_size(size_bytes: int, message: str, code: str) -> None:
    if size_bytes <= 0:
        raise ValidationError("file", "empty", "arquivo vazio")
    if size_bytes > MAX_FILE_BYTES:
        raise CapacityError(MAX_FILE_BYTES, message, code=code)


def _validate_cpf_digits(digits: str) -> bool:
    """Valida últimos 2 dígitos do CPF (algoritmo mod-11)."""
    nums = [int(d) for d in digits]

    # Primeiro dígito verificador
    weights_1 = list(range(10, 1, -1))
    sum_1 = sum(n * w for n, w in zip(nums[:9], weights_1))
    d1 = (sum_1 * 10) % 11
    d1 = 0 if d1 == 10 else d1

    # Segundo dígito verificador
    weights_2 = list(range(11, 1, -1))
    sum_2 = sum(n * w for n, w in zip(nums[:10], weights_2))
    d2 = (sum_2 * 10) % 11
    d2 = 0 if d2 == 10 else d2

    return nums[9] == d1 and nums[10] == d2
