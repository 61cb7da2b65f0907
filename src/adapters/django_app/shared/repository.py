"""
Repository Base - Funcionalidade comum dos repositórios Django ORM.

Fornece:
- Leitura por ID, contagem, remoção
- Recorte de página sobre um QuerySet (total + itens)
- Tradução de falhas do banco para exceções de domínio

Princípios:
- Repositórios são stateless
- Não contêm lógica de negócio
- Apenas persistência e queries
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Generic, Iterator, List, Optional, Sequence, Tuple, Type, TypeVar
import logging

from django.db import DatabaseError, models
from django.db.models import QuerySet

from src.core.shared.exceptions import InfrastructureError

logger = logging.getLogger(__name__)

# Type variables
T = TypeVar("T")  # Entity type
M = TypeVar("M", bound=models.Model)  # Model type


@contextmanager
def persistence_errors(operation: str) -> Iterator[None]:
    """
    Traduz DatabaseError em InfrastructureError.

    Inclui IntegrityError: quem espera violação de unicidade captura
    a IntegrityError dentro do bloco e levanta ConflictError.

    Example:
        with persistence_errors("withdraw_stock"):
            SweetModel.objects.filter(...).update(...)
    """
    try:
        yield
    except DatabaseError as e:
        logger.error(f"Database failure during {operation}: {e}")
        raise InfrastructureError() from e


class BaseRepository(ABC, Generic[T, M]):
    """
    Classe base abstrata para repositórios Django.

    Type Parameters:
        T: Tipo da entidade de domínio
        M: Tipo do Model Django

    Example:
        class DjangoSweetRepository(BaseRepository[SweetEntity, SweetModel]):
            model_class = SweetModel

            def to_entity(self, model):
                return SweetMapper.to_entity(model)
    """

    # Classe do model Django (definir na subclasse)
    model_class: Type[M]

    # Ordenação padrão das listagens
    default_ordering: Sequence[str] = ("-id",)

    @abstractmethod
    def to_entity(self, model: M) -> T:
        """Converte Model Django para Entity de domínio."""
        raise NotImplementedError

    def _get_base_queryset(self) -> QuerySet:
        return self.model_class.objects.all()

    def _to_entities(self, qs) -> List[T]:
        return [self.to_entity(m) for m in qs]

    def get_by_id(self, entity_id) -> Optional[T]:
        """
        Busca entidade por ID.

        Returns:
            Entidade encontrada ou None
        """
        with persistence_errors("get_by_id"):
            try:
                model = self._get_base_queryset().get(id=entity_id)
            except self.model_class.DoesNotExist:
                return None
        return self.to_entity(model)

    def delete(self, entity_id) -> bool:
        """
        Remove entidade.

        Returns:
            True se removido, False se não existia
        """
        with persistence_errors("delete"):
            deleted_count, _ = self.model_class.objects.filter(id=entity_id).delete()
        if deleted_count:
            logger.info(f"{self.model_class.__name__} deleted: {entity_id}")
        return deleted_count > 0

    def count(self) -> int:
        with persistence_errors("count"):
            return self.model_class.objects.count()

    def list_all(self) -> List[T]:
        """
        Lista todas as entidades na ordenação padrão.

        Warning:
            Sem paginação
        """
        with persistence_errors("list_all"):
            qs = self._get_base_queryset().order_by(*self.default_ordering)
            return self._to_entities(qs)

    def _paginate(self, qs: QuerySet, page: int, limit: int) -> Tuple[List[T], int]:
        """
        Recorta a página ``page`` (1-indexed) de ``qs``.

        Returns:
            (entidades da página, total sem paginação)
        """
        total = qs.count()
        offset = (page - 1) * limit
        if offset >= total:
            # página além do fim; o offset pode nem caber no LIMIT/OFFSET do SQL
            return [], total
        return self._to_entities(qs[offset:offset + limit]), total
