"""
Testes de Integração End-to-End.

Testes que validam o fluxo completo da aplicação:
- Container DI → Use Case → Repository → Unit of Work
- Domain Events → Publisher → Handler

Usa create_testing_container (tudo em memória, sem banco).
"""

from decimal import Decimal
from unittest.mock import Mock, patch

import pytest

from src.config.container import create_testing_container
from src.core.sweets.dtos import (
    CreateSweetInputDTO,
    SearchSweetsQueryDTO,
    StockOperationInputDTO,
    UpdateSweetInputDTO,
)
from src.core.sweets.ports import InMemorySweetRepository
from src.core.shared.exceptions import InsufficientStockError
from src.adapters.django_app.events import handlers
from src.adapters.django_app.events.publishers import InMemoryEventPublisher
from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def container():
    """Container com repositório, UoW e publisher em memória."""
    return create_testing_container()


@pytest.fixture
def publisher(container):
    return container.event_publisher()


@pytest.fixture
def seeded(container):
    """Catálogo de referência criado pelo próprio use case."""
    service = container.create_sweet_service()
    dados = [
        ("Chocolate Bar", "Milk chocolate bar", "2.99", 50),
        ("Dark Chocolate", "70% cocoa", "3.99", 30),
        ("Gummy Bears", "Fruit gummies", "1.99", 100),
        ("Caramel Candy", "Soft caramel", "2.50", 25),
        ("Mint Chocolate", "Chocolate with mint filling", "3.50", 40),
    ]
    return {
        nome: service.execute(
            CreateSweetInputDTO(name=nome, description=desc, price=preco, stock=estoque)
        )
        for nome, desc, preco, estoque in dados
    }


# =============================================================================
# Container
# =============================================================================

class TestContainerWiring:

    def test_providers_em_memoria(self, container):
        """Services recebem as implementações em memória."""
        assert isinstance(container.sweet_repository(), InMemorySweetRepository)
        assert isinstance(container.unit_of_work(), InMemoryUnitOfWork)
        assert isinstance(container.event_publisher(), InMemoryEventPublisher)

    def test_repositorio_compartilhado(self, container):
        """Singleton: todos os services enxergam o mesmo catálogo."""
        assert (
            container.purchase_sweet_service().sweet_repo
            is container.search_sweets_service().sweet_repo
        )

    def test_uow_novo_por_service(self, container):
        assert container.purchase_sweet_service().uow is not container.restock_sweet_service().uow

    def test_parametros_de_dominio(self, container):
        assert container.list_low_stock_service().default_threshold == 10
        assert container.search_sweets_service().default_limit == 10
        assert container.search_sweets_service().max_limit == 100


# =============================================================================
# Fluxos
# =============================================================================

class TestInventoryLifecycleIntegration:

    def test_fluxo_completo(self, container, publisher, seeded):
        """
        Compra 3 (50 -> 47), repõe 25 (-> 72), compra 1000 falha (72),
        e cada passo confirmado gera exatamente um evento.
        """
        sweet_id = seeded["Chocolate Bar"].id
        publisher.clear()

        compra = container.purchase_sweet_service().execute(
            StockOperationInputDTO(sweet_id=sweet_id, quantity=3, requested_by_id="7")
        )
        assert compra.remaining_stock == 47

        reposicao = container.restock_sweet_service().execute(
            StockOperationInputDTO(sweet_id=sweet_id, quantity=25)
        )
        assert reposicao.new_stock == 72

        with pytest.raises(InsufficientStockError):
            container.purchase_sweet_service().execute(
                StockOperationInputDTO(sweet_id=sweet_id, quantity=1000)
            )

        assert container.get_sweet_service().execute(sweet_id).stock == 72
        assert [e.event_type for e in publisher.published_events] == [
            "SweetPurchasedEvent",
            "SweetRestockedEvent",
        ]

    def test_atualizacao_refletida_na_busca(self, container, seeded):
        sweet_id = seeded["Gummy Bears"].id

        container.update_sweet_service().execute(
            UpdateSweetInputDTO(sweet_id=sweet_id, description="Sour chocolate gummies")
        )

        result = container.search_sweets_service().execute(
            SearchSweetsQueryDTO(query="chocolate")
        )
        assert result.total == 4

    def test_remocao_sai_do_relatorio(self, container, seeded):
        sweet_id = seeded["Caramel Candy"].id
        container.purchase_sweet_service().execute(
            StockOperationInputDTO(sweet_id=sweet_id, quantity=22)
        )
        assert [s.id for s in container.list_low_stock_service().execute()] == [sweet_id]

        container.delete_sweet_service().execute(sweet_id)

        assert container.list_low_stock_service().execute() == []
        assert len(container.list_sweets_service().execute()) == 4

    def test_precos_preservados(self, container, seeded):
        output = container.get_sweet_service().execute(seeded["Mint Chocolate"].id)

        assert output.price == Decimal("3.50")
        assert output.to_dict()["price"] == "3.50"


class TestEventHandlersIntegration:

    def test_evento_de_compra_dispara_alerta(self, container, publisher, seeded):
        """Evento publicado pelo use case é aceito pelo handler Celery."""
        sweet_id = seeded["Caramel Candy"].id
        container.purchase_sweet_service().execute(
            StockOperationInputDTO(sweet_id=sweet_id, quantity=20)
        )
        evento = publisher.get_events_by_type("SweetPurchasedEvent")[-1]

        with patch.object(handlers, "notify_low_stock") as mock_notify, \
                patch.object(handlers, "record_metric") as mock_metric:
            mock_notify.delay = Mock()
            mock_metric.delay = Mock()

            alertou = handlers.handle_sweet_purchased(evento.to_dict())

        assert alertou is True
        mock_notify.delay.assert_called_once_with(
            sweet_id=str(sweet_id), sweet_name="Caramel Candy", stock=5
        )

    def test_evento_de_criacao_registra_metrica(self, publisher, seeded):
        evento = publisher.get_events_by_type("SweetCreatedEvent")[0]

        with patch.object(handlers, "record_metric") as mock_metric:
            mock_metric.delay = Mock()
            handlers.handle_sweet_created(evento.to_dict())

        mock_metric.delay.assert_called_once_with(
            metric_name="sweets_created", value=1, tags={}
        )
