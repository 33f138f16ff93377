"""
Composition root — builds adapters and use cases from settings.

Routes never instantiate adapters themselves: they pull the shared
`Services` bundle from `app.state`, built lazily on first use.
"""

import logging
from dataclasses import dataclass

from fastapi import Request

from src.config.settings import Settings, get_settings
from src.core.concurrency import DriverLocks
from src.core.interfaces.driver_repository import IDriverRepository
from src.core.interfaces.notifier import INotifier
from src.core.interfaces.password_hasher import IPasswordHasher
from src.core.interfaces.storage_service import IFileStorage
from src.core.use_cases.authenticate_driver import AuthenticateDriverUseCase
from src.core.use_cases.close_account import CloseAccountUseCase
from src.core.use_cases.manage_profile import ManageProfileUseCase
from src.core.use_cases.register_driver import RegisterDriverUseCase
from src.core.use_cases.review_driver import ReviewDriverUseCase
from src.core.use_cases.submit_documents import SubmitDocumentsUseCase
from src.infrastructure.notifications.log_notifier import LoggingNotifier
from src.infrastructure.notifications.smtp_notifier import SmtpEmailNotifier
from src.infrastructure.security.bcrypt_hasher import BcryptPasswordHasher
from src.infrastructure.storage.local_storage import LocalFileStorage

logger = logging.getLogger(__name__)


@dataclass
class Services:
    repository: IDriverRepository
    notifier: INotifier
    hasher: IPasswordHasher
    storage: IFileStorage
    register: RegisterDriverUseCase
    authenticate: AuthenticateDriverUseCase
    documents: SubmitDocumentsUseCase
    review: ReviewDriverUseCase
    profile: ManageProfileUseCase
    account: CloseAccountUseCase
    max_batch_files: int


def build_repository(settings: Settings) -> IDriverRepository:
    backend = settings.storage_backend.lower()
    if backend == "memory":
        from src.infrastructure.memory.in_memory_repository import InMemoryDriverRepository
        return InMemoryDriverRepository()
    if backend == "json":
        from src.infrastructure.json_store.json_file_repository import JsonFileDriverRepository
        return JsonFileDriverRepository(settings.json_store_path)
    if backend == "sql":
        from src.infrastructure.db.database import create_db_engine, init_db, make_session_factory
        from src.infrastructure.db.repository import SqlDriverRepository
        engine = create_db_engine(settings.database_url)
        init_db(engine)
        return SqlDriverRepository(make_session_factory(engine))
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


def build_notifier(settings: Settings) -> INotifier:
    backend = settings.notifier_backend.lower()
    if backend == "smtp":
        return SmtpEmailNotifier.from_settings(settings)
    if backend == "log":
        return LoggingNotifier()
    raise ValueError(f"Unknown notifier backend: {settings.notifier_backend}")


def build_services(
    settings: Settings | None = None,
    *,
    repository: IDriverRepository | None = None,
    notifier: INotifier | None = None,
    hasher: IPasswordHasher | None = None,
    storage: IFileStorage | None = None,
) -> Services:
    """Factory — wire every use case to one repository and one lock table."""
    settings = settings or get_settings()
    repository = repository or build_repository(settings)
    notifier = notifier or build_notifier(settings)
    hasher = hasher or BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
    storage = storage or LocalFileStorage(settings.upload_dir)
    locks = DriverLocks()

    logger.info(
        f"Services built: storage={settings.storage_backend} "
        f"notifier={type(notifier).__name__} uploads={settings.upload_dir}"
    )
    return Services(
        repository=repository,
        notifier=notifier,
        hasher=hasher,
        storage=storage,
        register=RegisterDriverUseCase(repository, notifier, hasher),
        authenticate=AuthenticateDriverUseCase(repository, hasher),
        documents=SubmitDocumentsUseCase(
            repository, notifier, locks=locks, max_batch_files=settings.max_batch_files,
        ),
        review=ReviewDriverUseCase(repository, notifier, locks=locks),
        profile=ManageProfileUseCase(repository, hasher, locks=locks),
        account=CloseAccountUseCase(repository, locks=locks),
        max_batch_files=settings.max_batch_files,
    )


def get_services(request: Request) -> Services:
    """FastAPI dependency: lazy singleton stored on the app."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        services = build_services()
        request.app.state.services = services
    return services
