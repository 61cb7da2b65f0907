"""
Data Transfer Objects (DTOs) do Domínio de Doces.

Tipos de DTOs:
- Input DTOs: dados de entrada vindos das APIs
- Output DTOs: formato de resposta (chaves camelCase no to_dict,
  que é o contrato consumido pelo frontend)
- Query DTOs: parâmetros de busca e resultado paginado
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from .entities import SweetEntity
from .search import DEFAULT_PAGE_SIZE, total_pages


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CreateSweetInputDTO:
    """
    DTO de entrada para criar doce.

    Attributes:
        name: Nome (obrigatório)
        price: Preço (obrigatório; Decimal, número ou string)
        description: Descrição opcional
        stock: Estoque inicial opcional (default 0)
    """

    name: str
    price: Any
    description: Optional[str] = None
    stock: Optional[int] = None


@dataclass(frozen=True)
class UpdateSweetInputDTO:
    """
    DTO de atualização parcial.

    Um slot opcional por atributo mutável; None significa
    "não informado" e mantém o valor atual.
    """

    sweet_id: int
    name: Optional[str] = None
    description: Optional[str] = None
    price: Any = None
    stock: Optional[int] = None

    @property
    def has_changes(self) -> bool:
        return any(
            value is not None
            for value in (self.name, self.description, self.price, self.stock)
        )


@dataclass(frozen=True)
class StockOperationInputDTO:
    """
    DTO de entrada para compra ou reposição.

    Attributes:
        sweet_id: ID do doce
        quantity: Quantidade (inteiro positivo)
        requested_by_id: Quem solicitou (apenas para eventos/log)
    """

    sweet_id: int
    quantity: Any
    requested_by_id: Optional[str] = None


@dataclass(frozen=True)
class SearchSweetsQueryDTO:
    """
    Parâmetros de busca/filtro do catálogo.

    Valores crus são aceitos (strings de query string); a
    normalização fica em SweetSearchCriteria.build.
    """

    query: Optional[str] = None
    min_price: Any = None
    max_price: Any = None
    in_stock: bool = False
    page: int = 1
    limit: Optional[int] = None


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class SweetOutputDTO:
    """DTO de saída com os dados de um doce."""

    id: int
    name: str
    description: str
    price: Decimal
    stock: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, entity: SweetEntity) -> "SweetOutputDTO":
        return cls(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            price=entity.price,
            stock=entity.stock,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON, preço com 2 casas)."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": f"{self.price:.2f}",
            "stock": self.stock,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass
class PurchaseResultDTO:
    """Confirmação de compra."""

    purchased_quantity: int
    remaining_stock: int
    sweet_name: str
    message: str = "Purchase successful"

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "purchasedQuantity": self.purchased_quantity,
            "remainingStock": self.remaining_stock,
            "sweetName": self.sweet_name,
        }


@dataclass
class RestockResultDTO:
    """Confirmação de reposição."""

    added_quantity: int
    new_stock: int
    sweet_name: str
    message: str = "Restock successful"

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "addedQuantity": self.added_quantity,
            "newStock": self.new_stock,
            "sweetName": self.sweet_name,
        }


@dataclass
class PaginatedResultDTO:
    """
    Resultado paginado de busca.

    Attributes:
        items: Itens da página atual
        total: Total de itens filtrados (sem paginação)
        page: Página atual (1-indexed)
        limit: Itens por página
    """

    items: List[SweetOutputDTO]
    total: int
    page: int
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def to_dict(self) -> dict:
        return {
            "data": [item.to_dict() for item in self.items],
            "pagination": {
                "total": self.total,
                "page": self.page,
                "limit": self.limit,
                "totalPages": self.total_pages,
            },
        }
