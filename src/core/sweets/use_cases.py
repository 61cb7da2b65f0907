"""
Use Cases (Application Services) do Domínio de Doces.

Use Cases implementados:
- CreateSweetService: Cria doce
- GetSweetService: Obtém doce por ID
- ListSweetsService: Lista catálogo (created_at decrescente)
- UpdateSweetService: Atualização parcial
- DeleteSweetService: Remove doce
- PurchaseSweetService: Compra (decremento atômico de estoque)
- RestockSweetService: Reposição (incremento atômico de estoque)
- ListLowStockService: Relatório de estoque baixo
- SearchSweetsService: Busca com filtros e paginação

Responsabilidades dos Use Cases:
- Validar entrada
- Coordenar entidade e repositório
- Gerenciar transações (via UoW) nas escritas
- Disparar eventos de domínio
- Retornar DTOs de saída

Nenhuma operação é reprocessada internamente: erros de domínio
sobem para o chamador como estão.
"""

import logging
from typing import List, Optional

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ValidationError,
)

from .ports import SweetRepository
from .entities import SweetEntity
from .search import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, SweetSearchCriteria, validate_page
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
from .events import (
    SweetCreatedEvent,
    SweetUpdatedEvent,
    SweetDeletedEvent,
    SweetPurchasedEvent,
    SweetRestockedEvent,
)

logger = logging.getLogger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 10


def validate_sweet_id(sweet_id) -> int:
    """ID obrigatório, inteiro."""
    if sweet_id is None:
        raise ValidationError("ID do doce é obrigatório", field="sweet_id")
    if isinstance(sweet_id, bool) or not isinstance(sweet_id, int):
        raise ValidationError(f"ID do doce inválido: {sweet_id!r}", field="sweet_id")
    return sweet_id


def _sweet_not_found(sweet_id) -> EntityNotFoundError:
    return EntityNotFoundError(
        f"Doce {sweet_id} não encontrado",
        entity_type="Sweet",
        entity_id=sweet_id,
    )


class CreateSweetService:
    """
    Use Case: Criar um novo doce.

    Fluxo:
    1. Criar entidade (validações na entidade)
    2. Incluir via repositório (unicidade de nome garantida pelo store)
    3. Disparar evento SweetCreated
    4. Retornar DTO de saída

    Example:
        service = CreateSweetService(sweet_repo, uow)
        output = service.execute(CreateSweetInputDTO(name="Toffee", price="1.50"))
    """

    def __init__(self, sweet_repo: SweetRepository, uow: UnitOfWork):
        self.sweet_repo = sweet_repo
        self.uow = uow

    def execute(self, input_dto: CreateSweetInputDTO) -> SweetOutputDTO:
        """
        Raises:
            ValidationError: Se dados inválidos
            ConflictError: Se o nome já existe
        """
        with self.uow:
            sweet = SweetEntity.create(
                name=input_dto.name,
                price=input_dto.price,
                description=input_dto.description,
                stock=input_dto.stock,
            )

            sweet = self.sweet_repo.add(sweet)

            self.uow.publish_event(
                SweetCreatedEvent(
                    aggregate_id=str(sweet.id),
                    name=sweet.name,
                    price=sweet.price,
                    stock=sweet.stock,
                )
            )

        logger.info(f"Sweet created: {sweet.id} ({sweet.name})")
        return SweetOutputDTO.from_entity(sweet)


class GetSweetService:
    """Use Case: Obter um doce específico."""

    def __init__(self, sweet_repo: SweetRepository):
        self.sweet_repo = sweet_repo

    def execute(self, sweet_id: int) -> SweetOutputDTO:
        sweet_id = validate_sweet_id(sweet_id)
        sweet = self.sweet_repo.get_by_id(sweet_id)

        if not sweet:
            raise _sweet_not_found(sweet_id)

        return SweetOutputDTO.from_entity(sweet)


class ListSweetsService:
    """
    Use Case: Listar o catálogo completo, mais recentes primeiro.

    Não usa UoW pois é operação de leitura.
    """

    def __init__(self, sweet_repo: SweetRepository):
        self.sweet_repo = sweet_repo

    def execute(self) -> List[SweetOutputDTO]:
        return [SweetOutputDTO.from_entity(s) for s in self.sweet_repo.list_all()]


class UpdateSweetService:
    """
    Use Case: Atualização parcial de um doce.

    Campos não informados mantêm o valor anterior. Trocar o nome
    reverifica a unicidade.
    """

    def __init__(self, sweet_repo: SweetRepository, uow: UnitOfWork):
        self.sweet_repo = sweet_repo
        self.uow = uow

    def execute(self, input_dto: UpdateSweetInputDTO) -> SweetOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se o doce não existe
            ConflictError: Se o novo nome pertence a outro doce
            ValidationError: Se nada foi informado ou algum valor é inválido
        """
        sweet_id = validate_sweet_id(input_dto.sweet_id)

        if not input_dto.has_changes:
            raise ValidationError("Nenhum campo válido para atualização")

        with self.uow:
            atual = self.sweet_repo.get_by_id(sweet_id)

            if not atual:
                raise _sweet_not_found(sweet_id)

            if input_dto.name is not None:
                novo_nome = SweetEntity.validate_name(input_dto.name)
                if novo_nome != atual.name and self.sweet_repo.get_by_name(novo_nome):
                    raise ConflictError(
                        f"Já existe um doce com o nome '{novo_nome}'",
                        field="name",
                        value=novo_nome,
                    )

            sweet = self.sweet_repo.update(
                sweet_id,
                name=input_dto.name,
                description=input_dto.description,
                price=input_dto.price,
                stock=input_dto.stock,
            )

            alterados = [
                campo for campo in ("name", "description", "price", "stock")
                if getattr(input_dto, campo) is not None
            ]
            self.uow.publish_event(
                SweetUpdatedEvent(aggregate_id=str(sweet.id), changed_fields=alterados)
            )

        logger.info(f"Sweet updated: {sweet.id} fields={alterados}")
        return SweetOutputDTO.from_entity(sweet)


class DeleteSweetService:
    """Use Case: Remover doce do catálogo (remoção definitiva)."""

    def __init__(self, sweet_repo: SweetRepository, uow: UnitOfWork):
        self.sweet_repo = sweet_repo
        self.uow = uow

    def execute(self, sweet_id: int) -> dict:
        """
        Raises:
            EntityNotFoundError: Se o doce não existe
        """
        sweet_id = validate_sweet_id(sweet_id)

        with self.uow:
            sweet = self.sweet_repo.get_by_id(sweet_id)

            if not sweet or not self.sweet_repo.delete(sweet_id):
                raise _sweet_not_found(sweet_id)

            self.uow.publish_event(
                SweetDeletedEvent(aggregate_id=str(sweet_id), name=sweet.name)
            )

        logger.info(f"Sweet deleted: {sweet_id}")
        return {"message": "Sweet deleted successfully"}


class PurchaseSweetService:
    """
    Use Case: Comprar unidades de um doce.

    A verificação de estoque e o decremento acontecem num único
    passo atômico do repositório (withdraw_stock). Duas compras
    iguais decrementam duas vezes: a operação não é idempotente.

    Fluxo:
    1. Validar ID e quantidade
    2. Decremento condicional atômico
    3. Disparar evento SweetPurchased
    4. Retornar confirmação
    """

    def __init__(self, sweet_repo: SweetRepository, uow: UnitOfWork):
        self.sweet_repo = sweet_repo
        self.uow = uow

    def execute(self, input_dto: StockOperationInputDTO) -> PurchaseResultDTO:
        """
        Raises:
            ValidationError: ID ausente ou quantidade não positiva
            EntityNotFoundError: Doce inexistente
            InsufficientStockError: stock < quantity (estoque inalterado)
        """
        sweet_id = validate_sweet_id(input_dto.sweet_id)
        quantity = SweetEntity.validate_quantity(input_dto.quantity)

        with self.uow:
            sweet = self.sweet_repo.withdraw_stock(sweet_id, quantity)

            self.uow.publish_event(
                SweetPurchasedEvent(
                    aggregate_id=str(sweet.id),
                    sweet_name=sweet.name,
                    quantity=quantity,
                    remaining_stock=sweet.stock,
                    purchased_by_id=input_dto.requested_by_id,
                )
            )

        logger.info(f"Purchase: sweet={sweet.id} qty={quantity} remaining={sweet.stock}")
        return PurchaseResultDTO(
            purchased_quantity=quantity,
            remaining_stock=sweet.stock,
            sweet_name=sweet.name,
        )


class RestockSweetService:
    """
    Use Case: Repor estoque de um doce.

    Incremento atômico, sem limite superior.
    """

    def __init__(self, sweet_repo: SweetRepository, uow: UnitOfWork):
        self.sweet_repo = sweet_repo
        self.uow = uow

    def execute(self, input_dto: StockOperationInputDTO) -> RestockResultDTO:
        """
        Raises:
            ValidationError: ID ausente ou quantidade não positiva
            EntityNotFoundError: Doce inexistente
        """
        sweet_id = validate_sweet_id(input_dto.sweet_id)
        quantity = SweetEntity.validate_quantity(input_dto.quantity)

        with self.uow:
            sweet = self.sweet_repo.deposit_stock(sweet_id, quantity)

            self.uow.publish_event(
                SweetRestockedEvent(
                    aggregate_id=str(sweet.id),
                    sweet_name=sweet.name,
                    quantity=quantity,
                    new_stock=sweet.stock,
                    restocked_by_id=input_dto.requested_by_id,
                )
            )

        logger.info(f"Restock: sweet={sweet.id} qty={quantity} new_stock={sweet.stock}")
        return RestockResultDTO(
            added_quantity=quantity,
            new_stock=sweet.stock,
            sweet_name=sweet.name,
        )


class ListLowStockService:
    """
    Use Case: Relatório de estoque baixo.

    Retorna todos os doces com stock <= limite, o mais urgente
    (menor estoque) primeiro. Sem paginação.
    """

    def __init__(
        self,
        sweet_repo: SweetRepository,
        default_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    ):
        self.sweet_repo = sweet_repo
        self.default_threshold = default_threshold

    def execute(self, threshold: Optional[int] = None) -> List[SweetOutputDTO]:
        if threshold is None:
            threshold = self.default_threshold

        if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 0:
            raise ValidationError(
                "Limite de estoque baixo deve ser um inteiro >= 0",
                field="threshold"
            )

        sweets = self.sweet_repo.list_low_stock(threshold)
        logger.debug(f"Low stock report: threshold={threshold} found={len(sweets)}")
        return [SweetOutputDTO.from_entity(s) for s in sweets]


class SearchSweetsService:
    """
    Use Case: Buscar doces com filtros combinados e paginação.

    Filtros (AND): texto em name/description, faixa de preço
    inclusiva, apenas com estoque. Sem filtros = catálogo inteiro.
    Página além do fim retorna lista vazia, não erro.
    """

    def __init__(
        self,
        sweet_repo: SweetRepository,
        default_limit: int = DEFAULT_PAGE_SIZE,
        max_limit: int = MAX_PAGE_SIZE,
    ):
        self.sweet_repo = sweet_repo
        self.default_limit = default_limit
        self.max_limit = max_limit

    def execute(self, query_dto: SearchSweetsQueryDTO) -> PaginatedResultDTO:
        """
        Raises:
            ValidationError: page/limit fora do intervalo ou preço inválido
        """
        limit = self.default_limit if query_dto.limit is None else query_dto.limit
        page, limit = validate_page(query_dto.page, limit, self.max_limit)

        criteria = SweetSearchCriteria.build(
            query=query_dto.query,
            min_price=query_dto.min_price,
            max_price=query_dto.max_price,
            in_stock=query_dto.in_stock,
        )

        items, total = self.sweet_repo.search(criteria, page, limit)

        return PaginatedResultDTO(
            items=[SweetOutputDTO.from_entity(s) for s in items],
            total=total,
            page=page,
            limit=limit,
        )
