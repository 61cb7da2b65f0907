"""
Domínio de Doces - Catálogo e Estoque.

Este módulo contém a lógica de negócio do catálogo de doces:
- Entidade (SweetEntity)
- Use Cases (catálogo, compra/reposição, estoque baixo, busca)
- Domain Events (SweetCreated, SweetPurchased, SweetRestocked, ...)
- DTOs (Input/Output)
- Ports (SweetRepository)

Características do Domínio:
- Estoque nunca negativo, mesmo com compras concorrentes
- Nome único no catálogo
- Busca com filtros combináveis e paginação
"""

from .entities import SweetEntity
from .events import (
    SweetCreatedEvent,
    SweetUpdatedEvent,
    SweetDeletedEvent,
    SweetPurchasedEvent,
    SweetRestockedEvent,
)
from .dtos import (
    CreateSweetInputDTO,
    UpdateSweetInputDTO,
    StockOperationInputDTO,
    SearchSweetsQueryDTO,
    SweetOutputDTO,
    PurchaseResultDTO,
    RestockResultDTO,
    PaginatedResultDTO,
)
from .search import SweetSearchCriteria
from .ports import SweetRepository, InMemorySweetRepository
from .use_cases import (
    CreateSweetService,
    GetSweetService,
    ListSweetsService,
    UpdateSweetService,
    DeleteSweetService,
    PurchaseSweetService,
    RestockSweetService,
    ListLowStockService,
    SearchSweetsService,
)

__all__ = [
    # Entities
    "SweetEntity",
    # Events
    "SweetCreatedEvent",
    "SweetUpdatedEvent",
    "SweetDeletedEvent",
    "SweetPurchasedEvent",
    "SweetRestockedEvent",
    # DTOs
    "CreateSweetInputDTO",
    "UpdateSweetInputDTO",
    "StockOperationInputDTO",
    "SearchSweetsQueryDTO",
    "SweetOutputDTO",
    "PurchaseResultDTO",
    "RestockResultDTO",
    "PaginatedResultDTO",
    # Search
    "SweetSearchCriteria",
    # Ports
    "SweetRepository",
    "InMemorySweetRepository",
    # Use Cases
    "CreateSweetService",
    "GetSweetService",
    "ListSweetsService",
    "UpdateSweetService",
    "DeleteSweetService",
    "PurchaseSweetService",
    "RestockSweetService",
    "ListLowStockService",
    "SearchSweetsService",
]
