"""
Ports (Interfaces) do Domínio de Doces.

Define o contrato que os Adapters de persistência devem implementar
para o catálogo.

Requisitos do contrato:
- Busca única por ID
- Unicidade de nome garantida pelo próprio store (ConflictError)
- Alteração de estoque atômica por registro: a verificação
  "stock >= quantidade" e a escrita acontecem num único passo,
  sem trava global do catálogo

Implementações:
- DjangoSweetRepository (UPDATE condicional via ORM)
- InMemorySweetRepository (trava por doce; testes e desenvolvimento)
"""

import itertools
import logging
import threading
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from src.core.shared.exceptions import ConflictError, EntityNotFoundError

from .entities import SweetEntity
from .search import SweetSearchCriteria, paginate

logger = logging.getLogger(__name__)


@runtime_checkable
class SweetRepository(Protocol):
    """
    Interface para persistência de Doces.

    Todos os métodos devolvem cópias: alterar a entidade retornada
    não altera o registro armazenado.
    """

    def add(self, sweet: SweetEntity) -> SweetEntity:
        """
        Inclui doce novo e atribui o ID.

        Raises:
            ConflictError: Se já existe doce com o mesmo nome
        """
        ...

    def get_by_id(self, sweet_id: int) -> Optional[SweetEntity]:
        ...

    def get_by_name(self, name: str) -> Optional[SweetEntity]:
        ...

    def update(
        self,
        sweet_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        price=None,
        stock: Optional[int] = None,
    ) -> SweetEntity:
        """
        Atualização parcial atômica no registro.

        Apenas os campos informados são gravados; o estoque só é
        sobrescrito se ``stock`` for informado.

        Raises:
            EntityNotFoundError: Se o doce não existe
            ConflictError: Se o novo nome já pertence a outro doce
            ValidationError: Se algum valor informado for inválido
        """
        ...

    def delete(self, sweet_id: int) -> bool:
        """Remove doce. Retorna False se não existia."""
        ...

    def list_all(self) -> List[SweetEntity]:
        """Todos os doces, created_at decrescente."""
        ...

    def list_low_stock(self, threshold: int) -> List[SweetEntity]:
        """Doces com stock <= threshold, stock crescente."""
        ...

    def search(
        self,
        criteria: SweetSearchCriteria,
        page: int,
        limit: int,
    ) -> Tuple[List[SweetEntity], int]:
        """
        Filtra e pagina.

        Returns:
            (itens da página, total filtrado)
        """
        ...

    def withdraw_stock(self, sweet_id: int, quantity: int) -> SweetEntity:
        """
        Decremento condicional atômico.

        Raises:
            EntityNotFoundError: Se o doce não existe
            InsufficientStockError: Se stock < quantity (nada é alterado)
        """
        ...

    def deposit_stock(self, sweet_id: int, quantity: int) -> SweetEntity:
        """
        Incremento atômico.

        Raises:
            EntityNotFoundError: Se o doce não existe
        """
        ...

    def count(self) -> int:
        ...


def _ordenar_catalogo(sweets: List[SweetEntity]) -> List[SweetEntity]:
    return sorted(sweets, key=lambda s: (s.created_at, s.id or 0), reverse=True)


class InMemorySweetRepository:
    """
    Implementação em memória do SweetRepository.

    Concorrência:
    - Cada doce tem seu próprio ``threading.Lock``, mantido durante
      todo o ler-verificar-escrever de compra/reposição/atualização.
      Operações em doces diferentes não se bloqueiam.
    - ``_catalog_lock`` protege apenas a estrutura dos dicionários e o
      índice de nomes; nunca é mantido durante uma alteração de estoque.
    - Ordem de aquisição: trava do doce, depois trava do catálogo.

    Útil para:
    - Testes unitários
    - Desenvolvimento local

    Example:
        repo = InMemorySweetRepository()
        sweet = repo.add(SweetEntity.create(name="Toffee", price="1.50", stock=5))
        repo.withdraw_stock(sweet.id, 2).stock  # 3
    """

    def __init__(self):
        self._sweets: Dict[int, SweetEntity] = {}
        self._ids_by_name: Dict[str, int] = {}
        self._locks: Dict[int, threading.Lock] = {}
        self._catalog_lock = threading.Lock()
        self._sequence = itertools.count(1)

    def _lock_for(self, sweet_id: int) -> threading.Lock:
        with self._catalog_lock:
            lock = self._locks.get(sweet_id)
        if lock is None:
            raise self._not_found(sweet_id)
        return lock

    @staticmethod
    def _not_found(sweet_id) -> EntityNotFoundError:
        return EntityNotFoundError(
            f"Doce {sweet_id} não encontrado",
            entity_type="Sweet",
            entity_id=sweet_id,
        )

    def _current(self, sweet_id: int) -> SweetEntity:
        sweet = self._sweets.get(sweet_id)
        if sweet is None:
            # removido enquanto esperávamos a trava
            raise self._not_found(sweet_id)
        return sweet

    def add(self, sweet: SweetEntity) -> SweetEntity:
        with self._catalog_lock:
            if sweet.name in self._ids_by_name:
                raise ConflictError(
                    f"Já existe um doce com o nome '{sweet.name}'",
                    field="name",
                    value=sweet.name,
                )
            stored = sweet.copy()
            stored.id = next(self._sequence)
            self._sweets[stored.id] = stored
            self._ids_by_name[stored.name] = stored.id
            self._locks[stored.id] = threading.Lock()
        return stored.copy()

    def get_by_id(self, sweet_id: int) -> Optional[SweetEntity]:
        sweet = self._sweets.get(sweet_id)
        return sweet.copy() if sweet else None

    def get_by_name(self, name: str) -> Optional[SweetEntity]:
        sweet_id = self._ids_by_name.get(name)
        return self.get_by_id(sweet_id) if sweet_id is not None else None

    def update(self, sweet_id, name=None, description=None, price=None, stock=None):
        with self._lock_for(sweet_id):
            atualizado = self._current(sweet_id).copy()
            nome_anterior = atualizado.name
            atualizado.apply_update(
                name=name, description=description, price=price, stock=stock
            )

            with self._catalog_lock:
                if atualizado.name != nome_anterior:
                    if atualizado.name in self._ids_by_name:
                        raise ConflictError(
                            f"Já existe um doce com o nome '{atualizado.name}'",
                            field="name",
                            value=atualizado.name,
                        )
                    del self._ids_by_name[nome_anterior]
                    self._ids_by_name[atualizado.name] = sweet_id
                self._sweets[sweet_id] = atualizado

        return atualizado.copy()

    def delete(self, sweet_id: int) -> bool:
        try:
            lock = self._lock_for(sweet_id)
        except EntityNotFoundError:
            return False

        with lock:
            with self._catalog_lock:
                sweet = self._sweets.pop(sweet_id, None)
                if sweet is None:
                    return False
                self._ids_by_name.pop(sweet.name, None)
                self._locks.pop(sweet_id, None)
        return True

    def _snapshot(self) -> List[SweetEntity]:
        with self._catalog_lock:
            return [s.copy() for s in self._sweets.values()]

    def list_all(self) -> List[SweetEntity]:
        return _ordenar_catalogo(self._snapshot())

    def list_low_stock(self, threshold: int) -> List[SweetEntity]:
        baixos = [s for s in self._snapshot() if s.is_low_stock(threshold)]
        return sorted(baixos, key=lambda s: (s.stock, s.name))

    def search(self, criteria: SweetSearchCriteria, page: int, limit: int):
        return paginate(criteria.apply(self.list_all()), page, limit)

    def withdraw_stock(self, sweet_id: int, quantity: int) -> SweetEntity:
        with self._lock_for(sweet_id):
            atualizado = self._current(sweet_id).copy()
            atualizado.remove_stock(quantity)
            self._sweets[sweet_id] = atualizado
        logger.debug(f"Stock withdrawn: sweet={sweet_id} qty={quantity} left={atualizado.stock}")
        return atualizado.copy()

    def deposit_stock(self, sweet_id: int, quantity: int) -> SweetEntity:
        with self._lock_for(sweet_id):
            atualizado = self._current(sweet_id).copy()
            atualizado.add_stock(quantity)
            self._sweets[sweet_id] = atualizado
        logger.debug(f"Stock deposited: sweet={sweet_id} qty={quantity} now={atualizado.stock}")
        return atualizado.copy()

    def count(self) -> int:
        return len(self._sweets)

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        with self._catalog_lock:
            self._sweets.clear()
            self._ids_by_name.clear()
            self._locks.clear()
