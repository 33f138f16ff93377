"""
Adapter: bcrypt Password Hasher

Hash com salt embutido (bcrypt.gensalt) e verificação via
bcrypt.checkpw, que compara em tempo constante.
"""

import bcrypt

from src.core.interfaces.password_hasher import IPasswordHasher

# bcrypt ignora tudo além de 72 bytes
MAX_BCRYPT_BYTES = 72


class BcryptPasswordHasher(IPasswordHasher):

    def __init__(self, rounds: int = 12):
        self._rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(self._encode(password), bcrypt.gensalt(rounds=self._rounds)).decode()

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return bcrypt.checkpw(self._encode(password), hashed.encode())
        except ValueError:
            # hash armazenado corrompido / em outro formato
            return False

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:MAX_BCRYPT_BYTES]
