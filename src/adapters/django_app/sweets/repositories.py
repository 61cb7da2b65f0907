"""
Repositório Django para persistência de Doces.

Implementa o port SweetRepository definido no Core.
É um DRIVEN ADAPTER - acionado pelo Core em resposta a operações.

Concorrência:
- Compra é um UPDATE condicional (``stock >= quantidade``) com
  ``F('stock') - quantidade``: o banco verifica e decrementa no mesmo
  comando, sem ler-modificar-escrever em Python
- Atualização parcial trava a linha (select_for_update) e grava
  apenas os campos informados
- Nome único e ``stock >= 0`` também existem como restrições no banco
"""

from typing import List, Optional, Tuple
import logging

from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.utils import timezone

from src.core.sweets.entities import SweetEntity
from src.core.sweets.search import SweetSearchCriteria
from src.core.shared.exceptions import (
    ConflictError,
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)

from ..shared.repository import BaseRepository, persistence_errors
from .models import SweetModel
from .mappers import SweetMapper

logger = logging.getLogger(__name__)

CATALOG_ORDERING = ("-created_at", "-id")


def _not_found(sweet_id) -> EntityNotFoundError:
    return EntityNotFoundError(
        f"Doce {sweet_id} não encontrado",
        entity_type="Sweet",
        entity_id=sweet_id,
    )


def _name_conflict(name: str) -> ConflictError:
    return ConflictError(
        f"Já existe um doce com o nome '{name}'",
        field="name",
        value=name,
    )


class DjangoSweetRepository(BaseRepository[SweetEntity, SweetModel]):
    """
    Implementação Django do SweetRepository.

    Example:
        repo = DjangoSweetRepository()
        sweet = repo.add(SweetEntity.create(name="Toffee", price="1.50", stock=5))
        repo.withdraw_stock(sweet.id, 2).stock  # 3
    """

    model_class = SweetModel
    default_ordering = CATALOG_ORDERING

    def to_entity(self, model: SweetModel) -> SweetEntity:
        return SweetMapper.to_entity(model)

    def add(self, sweet: SweetEntity) -> SweetEntity:
        """
        Inclui doce novo; o ID vem do banco.

        Raises:
            ConflictError: Nome já existente (restrição UNIQUE)
        """
        model = SweetMapper.to_model(sweet)
        model.id = None

        with persistence_errors("add"):
            try:
                with transaction.atomic():
                    model.save(force_insert=True)
            except IntegrityError as e:
                logger.debug(f"Unique name violation on add: {sweet.name} ({e})")
                raise _name_conflict(sweet.name) from e

        logger.info(f"Sweet saved: {model.id}")
        return self.to_entity(model)

    def get_by_name(self, name: str) -> Optional[SweetEntity]:
        with persistence_errors("get_by_name"):
            model = SweetModel.objects.filter(name=name).first()
        return self.to_entity(model) if model else None

    def update(self, sweet_id, name=None, description=None, price=None, stock=None):
        """
        Atualização parcial com a linha travada.

        Só os campos informados entram no UPDATE, então uma compra
        concorrente nunca é sobrescrita por um estoque lido antes.
        """
        campos = ["updated_at"]
        if name is not None:
            campos.append("name")
        if description is not None:
            campos.append("description")
        if price is not None:
            campos.append("price")
        if stock is not None:
            campos.append("stock")

        with persistence_errors("update"):
            try:
                with transaction.atomic():
                    try:
                        model = SweetModel.objects.select_for_update().get(pk=sweet_id)
                    except SweetModel.DoesNotExist:
                        raise _not_found(sweet_id)

                    entity = self.to_entity(model)
                    entity.apply_update(
                        name=name, description=description, price=price, stock=stock
                    )

                    if (
                        "name" in campos
                        and SweetModel.objects.filter(name=entity.name)
                        .exclude(pk=sweet_id).exists()
                    ):
                        raise _name_conflict(entity.name)

                    SweetMapper.update_model(model, entity)
                    model.save(update_fields=campos)
            except IntegrityError as e:
                raise _name_conflict(name.strip() if name else "") from e

        logger.info(f"Sweet updated: {sweet_id} fields={campos}")
        return self.to_entity(model)

    def list_low_stock(self, threshold: int) -> List[SweetEntity]:
        with persistence_errors("list_low_stock"):
            qs = SweetModel.objects.filter(stock__lte=threshold).order_by("stock", "name")
            return self._to_entities(qs)

    def search(
        self,
        criteria: SweetSearchCriteria,
        page: int,
        limit: int,
    ) -> Tuple[List[SweetEntity], int]:
        """Traduz os critérios do Core para filtros do ORM."""
        qs = self._get_base_queryset()

        if criteria.query:
            qs = qs.filter(
                Q(name__icontains=criteria.query)
                | Q(description__icontains=criteria.query)
            )

        if criteria.min_price is not None:
            qs = qs.filter(price__gte=criteria.min_price)

        if criteria.max_price is not None:
            qs = qs.filter(price__lte=criteria.max_price)

        if criteria.in_stock:
            qs = qs.filter(stock__gt=0)

        with persistence_errors("search"):
            return self._paginate(qs.order_by(*CATALOG_ORDERING), page, limit)

    def withdraw_stock(self, sweet_id: int, quantity: int) -> SweetEntity:
        """
        Decremento condicional atômico.

        O UPDATE só casa se ``stock >= quantity``. Zero linhas afetadas
        significa doce inexistente ou estoque insuficiente; a releitura
        decide qual dos dois.
        """
        quantity = SweetEntity.validate_quantity(quantity)

        with persistence_errors("withdraw_stock"):
            with transaction.atomic():
                afetados = (
                    SweetModel.objects
                    .filter(pk=sweet_id, stock__gte=quantity)
                    .update(stock=F("stock") - quantity, updated_at=timezone.now())
                )

                if not afetados:
                    disponivel = (
                        SweetModel.objects
                        .filter(pk=sweet_id)
                        .values_list("stock", flat=True)
                        .first()
                    )
                    if disponivel is None:
                        raise _not_found(sweet_id)
                    raise InsufficientStockError(
                        sweet_id=sweet_id,
                        available=disponivel,
                        requested=quantity,
                    )

                model = SweetModel.objects.get(pk=sweet_id)

        logger.debug(f"Stock withdrawn: sweet={sweet_id} qty={quantity} left={model.stock}")
        return self.to_entity(model)

    def deposit_stock(self, sweet_id: int, quantity: int) -> SweetEntity:
        """
        Incremento atômico via ``F('stock') + quantidade``.

        Mesmo esquema do decremento: o UPDATE só casa se o saldo
        resultante couber em ``SweetEntity.STOCK_MAX``.
        """
        quantity = SweetEntity.validate_quantity(quantity)
        teto = SweetEntity.STOCK_MAX - quantity

        with persistence_errors("deposit_stock"):
            with transaction.atomic():
                afetados = (
                    SweetModel.objects
                    .filter(pk=sweet_id, stock__lte=teto)
                    .update(stock=F("stock") + quantity, updated_at=timezone.now())
                )
                if not afetados:
                    if not SweetModel.objects.filter(pk=sweet_id).exists():
                        raise _not_found(sweet_id)
                    raise ValidationError(
                        f"Estoque resultante excede o máximo de {SweetEntity.STOCK_MAX}",
                        field="quantity",
                    )

                model = SweetModel.objects.get(pk=sweet_id)

        logger.debug(f"Stock deposited: sweet={sweet_id} qty={quantity} now={model.stock}")
        return self.to_entity(model)
