"""
Adapter: Local File Storage

Implementação do contrato IFileStorage no filesystem local:
<base_dir>/<driver_id>/<name>. Um novo envio com o mesmo nome
sobrescreve o anterior; as rotas usam nomes únicos por envio.
"""

import hashlib
import logging
from pathlib import Path

from src.core.errors import InfraError, NotFoundError
from src.core.interfaces.storage_service import IFileStorage, StorageRef

logger = logging.getLogger(__name__)


class LocalFileStorage(IFileStorage):

    def __init__(self, base_dir: str | Path):
        self._base = Path(base_dir)

    def save(self, driver_id: str, name: str, data: bytes, content_type: str = "application/octet-stream") -> StorageRef:
        target = self._base / _safe(driver_id) / _safe(name)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to save {target}: {e}")
            raise InfraError(f"falha ao salvar arquivo: {e}", code="infra.salvar_arquivo") from e

        return StorageRef(
            path=str(target),
            size_bytes=len(data),
            sha256=hashlib.sha256(data).hexdigest(),
            content_type=content_type,
        )

    def read(self, path: str) -> bytes:
        try:
            return Path(path).read_bytes()
        except FileNotFoundError:
            raise NotFoundError("file") from None
        except OSError as e:
            raise InfraError(f"falha ao ler arquivo: {e}") from e

    def exists(self, path: str) -> bool:
        return Path(path).is_file()

    def delete(self, path: str) -> None:
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            raise InfraError(f"falha ao remover arquivo: {e}") from e
        logger.debug(f"Removed {path}")


def _safe(component: str) -> str:
    """Keeps a path component inside its parent directory."""
    name = Path(component).name
    if name in ("", ".", ".."):
        raise InfraError(f"nome de arquivo inválido: {component!r}")
    return name
