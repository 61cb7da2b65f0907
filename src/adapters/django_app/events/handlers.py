"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados via Celery quando Domain Events são
publicados. Nenhum deles altera estoque: apenas reagem ao que já
foi confirmado.

Tipos de Handlers:
- Notificação: alerta de estoque baixo
- Métricas: contadores de compras/reposições

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        # Processar evento

``event_data`` é o resultado de ``DomainEvent.to_dict()``; os campos
específicos do evento ficam em ``event_data["data"]``.
"""

import logging
from typing import Any, Dict, List

from celery import shared_task
from django.conf import settings

logger = logging.getLogger(__name__)


def _low_stock_threshold() -> int:
    return getattr(settings, "LOW_STOCK_THRESHOLD", 10)


# =============================================================================
# Event Handlers - Sweets
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_sweet_created(self, event_data: Dict[str, Any]) -> None:
    """Handler para SweetCreatedEvent: registra métrica de catálogo."""
    data = event_data.get('data', {})

    logger.info(
        f"[HANDLER] SweetCreated: {event_data.get('aggregate_id')} | "
        f"Nome: {data.get('name')} | Estoque: {data.get('stock')}"
    )

    record_metric.delay(metric_name='sweets_created', value=1, tags={})


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_sweet_purchased(self, event_data: Dict[str, Any]) -> bool:
    """
    Handler para SweetPurchasedEvent.

    Ações:
    - Registrar métrica de unidades vendidas
    - Alertar estoque baixo se remaining_stock <= LOW_STOCK_THRESHOLD

    Returns:
        True se o alerta de estoque baixo foi disparado
    """
    sweet_id = event_data.get('aggregate_id')
    data = event_data.get('data', {})
    restante = data.get('remaining_stock', 0)

    logger.info(
        f"[HANDLER] SweetPurchased: {sweet_id} | "
        f"Qtd: {data.get('quantity')} | Restante: {restante}"
    )

    record_metric.delay(
        metric_name='sweets_units_sold',
        value=data.get('quantity', 0),
        tags={'sweet_id': sweet_id},
    )

    if restante <= _low_stock_threshold():
        notify_low_stock.delay(
            sweet_id=sweet_id,
            sweet_name=data.get('sweet_name', ''),
            stock=restante,
        )
        return True

    return False


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_sweet_restocked(self, event_data: Dict[str, Any]) -> None:
    """Handler para SweetRestockedEvent: registra métrica de reposição."""
    sweet_id = event_data.get('aggregate_id')
    data = event_data.get('data', {})

    logger.info(
        f"[HANDLER] SweetRestocked: {sweet_id} | "
        f"Qtd: {data.get('quantity')} | Novo estoque: {data.get('new_stock')}"
    )

    record_metric.delay(
        metric_name='sweets_units_restocked',
        value=data.get('quantity', 0),
        tags={'sweet_id': sweet_id},
    )


@shared_task(bind=True, ignore_result=True)
def handle_sweet_deleted(self, event_data: Dict[str, Any]) -> None:
    """Handler para SweetDeletedEvent."""
    logger.info(
        f"[HANDLER] SweetDeleted: {event_data.get('aggregate_id')} | "
        f"Nome: {event_data.get('data', {}).get('name')}"
    )


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

EVENT_HANDLERS = {
    'SweetCreatedEvent': handle_sweet_created,
    'SweetPurchasedEvent': handle_sweet_purchased,
    'SweetRestockedEvent': handle_sweet_restocked,
    'SweetDeletedEvent': handle_sweet_deleted,
}


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> bool:
    """
    Dispatcher central para Domain Events.

    Roteia eventos para os handlers apropriados. Eventos sem
    handler (ex: SweetUpdatedEvent) são apenas logados.

    Returns:
        True se algum handler foi acionado
    """
    handler = EVENT_HANDLERS.get(event_type)

    if handler is None:
        logger.debug(f"[DISPATCHER] Sem handler para {event_type}")
        return False

    logger.info(f"[DISPATCHER] Roteando {event_type} para handler")
    handler.delay(event_data)
    return True


# =============================================================================
# Notification / Metric Tasks
# =============================================================================

@shared_task(bind=True, max_retries=3, default_retry_delay=120)
def notify_low_stock(self, sweet_id: str, sweet_name: str, stock: int) -> None:
    """Alerta de reposição necessária."""
    logger.warning(
        f"[NOTIFICATION] Estoque baixo: {sweet_name} ({sweet_id}) "
        f"com {stock} unidade(s)"
    )


@shared_task(bind=True, ignore_result=True)
def record_metric(
    self,
    metric_name: str,
    value: float,
    tags: Dict[str, str] = None
) -> None:
    """Registra métrica para monitoramento."""
    logger.info(f"[METRIC] {metric_name}={value} | tags={tags or {}}")


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True)
def check_low_stock(self) -> List[int]:
    """
    Varre o catálogo e alerta cada doce com estoque baixo.

    Executada periodicamente pelo Celery Beat.

    Returns:
        IDs dos doces alertados
    """
    from src.config.container import get_container

    service = get_container().list_low_stock_service()
    baixos = service.execute()

    logger.info(f"[SCHEDULED] {len(baixos)} doce(s) com estoque baixo")

    for sweet in baixos:
        notify_low_stock.delay(
            sweet_id=str(sweet.id),
            sweet_name=sweet.name,
            stock=sweet.stock,
        )

    return [sweet.id for sweet in baixos]
