"""
Contract: File Storage

Grava e lê os arquivos enviados (documentos, foto de perfil).
O core só conhece o caminho devolvido; o layout em disco/bucket
é decisão da implementação.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class StorageRef:
    """Referência a um arquivo armazenado."""
    path: str
    size_bytes: int
    sha256: str
    content_type: str


class IFileStorage(ABC):
    """
    Port: File Storage

    Implementação pode ser filesystem local, S3, MinIO, etc.
    """

    @abstractmethod
    def save(self, driver_id: str, name: str, data: bytes, content_type: str = "application/octet-stream") -> StorageRef:
        """
        Grava um arquivo do motorista.

        Args:
            driver_id: Dono do arquivo.
            name: Nome lógico (ex: "CNH.pdf", "foto_perfil.png").
            data: Conteúdo em bytes.
            content_type: MIME type.

        Returns:
            StorageRef com caminho e hash.
        """
        ...

    @abstractmethod
    def read(self, path: str) -> bytes:
        """
        Raises:
            NotFoundError(entity="file"): arquivo ausente.
        """
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        ...

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove o arquivo; ausente não é erro."""
        ...
