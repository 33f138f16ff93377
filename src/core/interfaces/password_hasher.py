"""
Contract: Password Hasher

Senhas nunca são armazenadas em texto puro: apenas hash com salt,
verificado em tempo constante.
"""

from abc import ABC, abstractmethod


class IPasswordHasher(ABC):

    @abstractmethod
    def hash(self, password: str) -> str:
        """Gera o hash (com salt embutido) da senha."""
        ...

    @abstractmethod
    def verify(self, password: str, hashed: str) -> bool:
        """Compara a senha com o hash armazenado."""
        ...
