"""
Critérios de busca e paginação do catálogo.

Lógica pura, sem dependência de persistência:
- SweetSearchCriteria: filtros combináveis (AND) e ``matches``
- paginate: recorte de página + total e total de páginas

Repositórios que conseguem filtrar no banco (Django) traduzem os
mesmos critérios para queries; o InMemory usa ``matches`` direto.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from math import ceil
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from src.core.shared.exceptions import ValidationError

from .entities import SweetEntity

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def _parse_price_bound(value, field: str) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Filtro de preço inválido: {value!r}", field=field)
    try:
        bound = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Filtro de preço inválido: {value!r}", field=field)
    if not bound.is_finite() or bound < 0:
        raise ValidationError(f"Filtro de preço inválido: {value!r}", field=field)
    return bound


@dataclass(frozen=True)
class SweetSearchCriteria:
    """
    Filtros de busca, todos opcionais.

    Attributes:
        query: Substring (case-insensitive) em name OU description
        min_price: Limite inferior inclusivo
        max_price: Limite superior inclusivo
        in_stock: Se True, apenas stock > 0
    """

    query: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    in_stock: bool = False

    @classmethod
    def build(cls, query=None, min_price=None, max_price=None, in_stock=None):
        """
        Normaliza entradas cruas (strings de query string, floats).

        Query vazia ou só com espaços equivale a nenhum filtro de texto.
        ``min_price > max_price`` não é erro: apenas não casa nada.
        """
        texto = query.strip() if isinstance(query, str) else None
        return cls(
            query=texto or None,
            min_price=_parse_price_bound(min_price, "minPrice"),
            max_price=_parse_price_bound(max_price, "maxPrice"),
            in_stock=bool(in_stock),
        )

    @property
    def is_empty(self) -> bool:
        return (
            self.query is None
            and self.min_price is None
            and self.max_price is None
            and not self.in_stock
        )

    def matches(self, sweet: SweetEntity) -> bool:
        if self.query is not None:
            termo = self.query.casefold()
            if termo not in sweet.name.casefold() and termo not in sweet.description.casefold():
                return False
        if self.min_price is not None and sweet.price < self.min_price:
            return False
        if self.max_price is not None and sweet.price > self.max_price:
            return False
        if self.in_stock and sweet.stock <= 0:
            return False
        return True

    def apply(self, sweets: Iterable[SweetEntity]) -> List[SweetEntity]:
        return [s for s in sweets if self.matches(s)]


def validate_page(page, limit, max_limit: int = MAX_PAGE_SIZE) -> Tuple[int, int]:
    """
    Valida parâmetros de paginação (1-indexed).

    Raises:
        ValidationError: page < 1, limit fora de [1, max_limit]
    """
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        raise ValidationError("Página deve ser um inteiro >= 1", field="page")
    if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= max_limit:
        raise ValidationError(
            f"Limite deve ser um inteiro entre 1 e {max_limit}",
            field="limit"
        )
    return page, limit


def total_pages(total: int, limit: int) -> int:
    """ceil(total / limit); zero itens = zero páginas."""
    return ceil(total / limit) if total else 0


def paginate(items: Sequence[T], page: int, limit: int) -> Tuple[List[T], int]:
    """
    Recorta ``items`` em ``[(page-1)*limit, page*limit)``.

    Página além do fim devolve lista vazia; o total continua sendo
    o tamanho completo da sequência filtrada.

    Returns:
        (itens da página, total)
    """
    offset = (page - 1) * limit
    return list(items[offset:offset + limit]), len(items)
