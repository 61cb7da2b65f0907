"""
Event Publishers - Publicadores de Eventos de Domínio.

Responsável por entregar eventos (já confirmados pelo UoW) para
handlers. Implementações:
- LoggingEventPublisher: Loga e executa handlers locais (desenvolvimento)
- CeleryEventPublisher: Publica via Celery (produção)
- InMemoryEventPublisher: Para testes

Padrão Observer/Pub-Sub para desacoplamento.
"""

from typing import Callable, Dict, List, Optional
import json
import logging

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)

PUBLISHER_MODES = ("sync", "celery", "memory")


class _LocalHandlersMixin:
    """Registro de handlers síncronos por tipo de evento."""

    def _init_handlers(self) -> None:
        self._handlers: Dict[str, List[Callable[[DomainEvent], None]]] = {}

    def register_handler(
        self,
        event_type: str,
        handler: Callable[[DomainEvent], None]
    ) -> None:
        """Registra handler para tipo de evento."""
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler para {event.event_type}: {e}", exc_info=True)


class LoggingEventPublisher(_LocalHandlersMixin, EventPublisher):
    """
    Publisher que loga eventos.

    Usado em desenvolvimento para visualizar eventos sem
    infraestrutura de mensageria.
    """

    def __init__(self, log_level: int = logging.INFO):
        self._log_level = log_level
        self._init_handlers()

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event.to_dict()['data'], default=str)}"
        )
        self._dispatch_to_handlers(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para o dispatcher Celery.

    Falha de broker é logada e não interrompe o fluxo principal:
    a operação já foi confirmada no banco.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        from src.adapters.django_app.events.handlers import dispatch_domain_event

        try:
            dispatch_domain_event.delay(event.event_type, event.to_dict())
        except Exception as e:
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)


class InMemoryEventPublisher(_LocalHandlersMixin, EventPublisher):
    """
    Publisher em memória para testes.

    Armazena eventos publicados para verificação.
    """

    def __init__(self):
        self._published_events: List[DomainEvent] = []
        self._init_handlers()

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def clear(self) -> None:
        self._published_events.clear()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]


def get_event_publisher(mode: Optional[str] = None) -> EventPublisher:
    """
    Factory para obter publisher apropriado.

    Args:
        mode: "sync", "celery" ou "memory". Se None, usa
            settings.EVENT_PUBLISHER_MODE (default "sync").

    Returns:
        Publisher configurado
    """
    if mode is None:
        from django.conf import settings
        mode = getattr(settings, "EVENT_PUBLISHER_MODE", "sync")

    if mode not in PUBLISHER_MODES:
        raise ValueError(f"EVENT_PUBLISHER_MODE inválido: {mode!r}")

    if mode == "celery":
        return CeleryEventPublisher()
    if mode == "memory":
        return InMemoryEventPublisher()
    return LoggingEventPublisher()
