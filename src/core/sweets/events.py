"""
Domain Events do Domínio de Doces.

Eventos:
- SweetCreatedEvent: novo doce no catálogo
- SweetUpdatedEvent: dados alterados (atualização parcial)
- SweetDeletedEvent: doce removido
- SweetPurchasedEvent: estoque retirado por compra
- SweetRestockedEvent: estoque reposto

Uso:
    with uow:
        sweet = repo.withdraw_stock(sweet_id, quantity)
        uow.publish_event(SweetPurchasedEvent(...))
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from src.core.shared.events import DomainEvent


@dataclass
class SweetCreatedEvent(DomainEvent):
    """Evento: doce foi criado."""

    name: str = ""
    price: Decimal = field(default_factory=lambda: Decimal("0.00"))
    stock: int = 0

    @property
    def aggregate_type(self) -> str:
        return "Sweet"


@dataclass
class SweetUpdatedEvent(DomainEvent):
    """
    Evento: doce foi atualizado.

    Attributes:
        changed_fields: Campos informados na atualização
    """

    changed_fields: List[str] = field(default_factory=list)

    @property
    def aggregate_type(self) -> str:
        return "Sweet"


@dataclass
class SweetDeletedEvent(DomainEvent):
    """Evento: doce foi removido do catálogo."""

    name: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Sweet"


@dataclass
class SweetPurchasedEvent(DomainEvent):
    """
    Evento: unidades foram compradas.

    Handlers típicos:
    - Alertar estoque baixo quando remaining_stock <= limite
    """

    sweet_name: str = ""
    quantity: int = 0
    remaining_stock: int = 0
    purchased_by_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Sweet"


@dataclass
class SweetRestockedEvent(DomainEvent):
    """Evento: estoque foi reposto."""

    sweet_name: str = ""
    quantity: int = 0
    new_stock: int = 0
    restocked_by_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Sweet"
