"""
Unit of Work sobre ``django.db.transaction``.

Cada ``with uow:`` corresponde a um bloco ``transaction.atomic``;
os eventos do caso de uso saem para o publisher depois que o bloco
fecha sem erro.

O bloco atomic aninha como savepoint quando já existe transação
aberta (por exemplo, ATOMIC_REQUESTS ou o TestCase do pytest-django).
"""

from typing import List, Optional
import logging

from django.db import transaction

from src.core.shared.interfaces import UnitOfWork, EventPublisher
from src.core.shared.events import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    UnitOfWork do banco Django.

    Example:
        with DjangoUnitOfWork(event_publisher=publisher) as uow:
            sweet = repo.withdraw_stock(sweet_id, 2)
            uow.publish_event(SweetPurchasedEvent(...))
        # commit; publisher recebe o evento

    Se o bloco levantar exceção, o atomic é desfeito e a fila
    de eventos é esvaziada sem publicar nada.
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        """
        Args:
            event_publisher: Publicador de eventos (Celery, log, memória)
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Fecha o bloco atomic e publica os eventos.

        Ordem de execução:
        1. Commit (ou release do savepoint)
        2. Publicar eventos para handlers
        3. Limpar estado interno

        Raises:
            Exception: Se o commit falhar, eventos são descartados
        """
        if self._committed or self._rolled_back:
            logger.warning("Transaction already finalized")
            return

        atomic, self._atomic = self._atomic, None
        if atomic is not None:
            try:
                atomic.__exit__(None, None, None)
            except Exception as e:
                logger.error(f"Commit failed: {e}")
                self._rolled_back = True
                self.clear_events()
                raise
            logger.debug("Transaction committed")

        self._committed = True

        if self._events:
            self._publish_events()

    def rollback(self) -> None:
        """
        Desfaz todas as mudanças e descarta eventos.

        Chamado automaticamente se exceção ocorrer dentro do contexto.
        """
        if self._committed or self._rolled_back:
            return

        atomic, self._atomic = self._atomic, None
        try:
            if atomic is not None:
                # qualquer exceção marca o bloco para rollback
                atomic.__exit__(RuntimeError, RuntimeError("rollback"), None)
                logger.debug("Transaction rolled back")
        finally:
            self._rolled_back = True
            self.clear_events()

    def _publish_events(self) -> None:
        """
        Publica eventos após o commit.

        Falha de publicação é logada e não desfaz a operação já
        confirmada no banco.
        """
        for event in self._events:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )

            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event {event.event_type}: {e}")

        self.clear_events()

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes e para o InMemorySweetRepository.

    Não há transação real; apenas registra eventos "publicados"
    e repassa ao publisher, se houver.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False

    def commit(self) -> None:
        self._committed = True
        eventos = list(self._events)
        self._published_events.extend(eventos)
        self.clear_events()
        if self._event_publisher:
            self._event_publisher.publish_batch(eventos)

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Eventos que foram 'publicados'."""
        return self._published_events

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()
