"""
Application Settings.

Centraliza toda configuração via .env / variáveis de ambiente.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configurações carregadas de variáveis de ambiente."""

    # --- App ---
    env: str = "development"
    debug: bool = False                   # tracebacks nas respostas 500
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # --- Persistência ---
    storage_backend: str = "sql"          # "memory", "json", "sql"
    database_url: str = "sqlite:///driver_onboarding.db"
    json_store_path: str = "data/motoristas.json"

    # --- Uploads ---
    upload_dir: str = "data/uploads"
    max_batch_files: int = 3

    # --- Notificações ---
    notifier_backend: str = "log"         # "log", "smtp"
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    smtp_sender: str = "no-reply@motoristas.local"
    smtp_timeout_seconds: float = 10.0

    # --- Segurança ---
    bcrypt_rounds: int = 12

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Singleton de settings."""
    return Settings()
