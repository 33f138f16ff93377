"""
Contract: Notifier

Canal de notificação ao motorista (e-mail ou outro). Chamado pelos
use cases nas transições; nunca decide o resultado da operação.
"""

from abc import ABC, abstractmethod


class INotifier(ABC):
    """
    Port: Notifier

    Cada método devolve True/False. Implementações não devem lançar
    exceções, mas os use cases ainda assim as capturam e registram.
    """

    @abstractmethod
    def notify_registration(self, email: str, name: str) -> bool:
        ...

    @abstractmethod
    def notify_documents_received(self, email: str, name: str) -> bool:
        ...

    @abstractmethod
    def notify_approval(self, email: str, name: str) -> bool:
        ...

    @abstractmethod
    def notify_rejection(self, email: str, name: str, reason: str) -> bool:
        ...
