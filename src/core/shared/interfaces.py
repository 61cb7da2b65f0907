"""
Ports compartilhados entre Core e Adapters.

Driven ports genéricos usados por todos os casos de uso de escrita:
- UnitOfWork: fronteira transacional + fila de eventos
- EventPublisher: entrega de eventos já confirmados

O port de persistência do catálogo fica em ``src.core.sweets.ports``.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Fronteira transacional de um caso de uso.

    Uso:
        with uow:
            sweet = repo.withdraw_stock(sweet_id, 3)
            uow.publish_event(SweetPurchasedEvent(...))

    Saída normal confirma; saída por exceção desfaz e a exceção
    continua subindo. Os eventos enfileirados dentro do bloco só
    chegam ao publisher depois da confirmação.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is None:
            self.commit()
        else:
            self.rollback()
        return False

    @abstractmethod
    def _begin_transaction(self) -> None:
        """Abre a transação do adapter."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """Confirma a transação e então entrega os eventos pendentes."""
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz a transação; eventos pendentes são descartados."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """Agenda ``event`` para depois do commit."""
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Cópia da fila pendente."""
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()


class EventPublisher(ABC):
    """
    Entrega de eventos para consumidores.

    Implementações: log local, Celery, memória (testes).
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        """Entrega na ordem recebida."""
        for event in events:
            self.publish(event)
