"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção explícita.

Padrões:
- Singleton: Uma instância para toda app (repository, publisher)
- Factory: Nova instância por chamada (services, UoW)
"""

from dependency_injector import containers, providers
from typing import Optional


def _settings_value(name: str, default: int) -> int:
    from django.conf import settings
    return getattr(settings, name, default)


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Infrastructure: Event publisher
    - Repositories: Persistência
    - Unit of Work: Transações
    - Services: Use Cases

    Example:
        from src.config.container import get_container

        service = get_container().purchase_sweet_service()
        result = service.execute(input_dto)
    """

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Singleton(
        lambda: __import__(
            'src.adapters.django_app.events.publishers',
            fromlist=['get_event_publisher']
        ).get_event_publisher()
    )

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    sweet_repository = providers.Singleton(
        lambda: __import__(
            'src.adapters.django_app.sweets.repositories',
            fromlist=['DjangoSweetRepository']
        ).DjangoSweetRepository()
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        lambda event_publisher: __import__(
            'src.adapters.django_app.shared.unit_of_work',
            fromlist=['DjangoUnitOfWork']
        ).DjangoUnitOfWork(event_publisher=event_publisher),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Parâmetros do domínio (lidos dos settings sob demanda)
    # =========================================================================

    low_stock_threshold = providers.Callable(_settings_value, 'LOW_STOCK_THRESHOLD', 10)
    search_default_limit = providers.Callable(_settings_value, 'SEARCH_DEFAULT_LIMIT', 10)
    search_max_limit = providers.Callable(_settings_value, 'SEARCH_MAX_LIMIT', 100)

    # =========================================================================
    # Services / Use Cases (Factory - nova instância por chamada)
    # =========================================================================

    create_sweet_service = providers.Factory(
        lambda sweet_repo, uow: __import__(
            'src.core.sweets.use_cases',
            fromlist=['CreateSweetService']
        ).CreateSweetService(sweet_repo=sweet_repo, uow=uow),
        sweet_repo=sweet_repository,
        uow=unit_of_work,
    )

    get_sweet_service = providers.Factory(
        lambda sweet_repo: __import__(
            'src.core.sweets.use_cases',
            fromlist=['GetSweetService']
        ).GetSweetService(sweet_repo=sweet_repo),
        sweet_repo=sweet_repository,
    )

    list_sweets_service = providers.Factory(
        lambda sweet_repo: __import__(
            'src.core.sweets.use_cases',
            fromlist=['ListSweetsService']
        ).ListSweetsService(sweet_repo=sweet_repo),
        sweet_repo=sweet_repository,
    )

    update_sweet_service = providers.Factory(
        lambda sweet_repo, uow: __import__(
            'src.core.sweets.use_cases',
            fromlist=['UpdateSweetService']
        ).UpdateSweetService(sweet_repo=sweet_repo, uow=uow),
        sweet_repo=sweet_repository,
        uow=unit_of_work,
    )

    delete_sweet_service = providers.Factory(
        lambda sweet_repo, uow: __import__(
            'src.core.sweets.use_cases',
            fromlist=['DeleteSweetService']
        ).DeleteSweetService(sweet_repo=sweet_repo, uow=uow),
        sweet_repo=sweet_repository,
        uow=unit_of_work,
    )

    purchase_sweet_service = providers.Factory(
        lambda sweet_repo, uow: __import__(
            'src.core.sweets.use_cases',
            fromlist=['PurchaseSweetService']
        ).PurchaseSweetService(sweet_repo=sweet_repo, uow=uow),
        sweet_repo=sweet_repository,
        uow=unit_of_work,
    )

    restock_sweet_service = providers.Factory(
        lambda sweet_repo, uow: __import__(
            'src.core.sweets.use_cases',
            fromlist=['RestockSweetService']
        ).RestockSweetService(sweet_repo=sweet_repo, uow=uow),
        sweet_repo=sweet_repository,
        uow=unit_of_work,
    )

    # Leituras (sem UoW)
    list_low_stock_service = providers.Factory(
        lambda sweet_repo, threshold: __import__(
            'src.core.sweets.use_cases',
            fromlist=['ListLowStockService']
        ).ListLowStockService(sweet_repo=sweet_repo, default_threshold=threshold),
        sweet_repo=sweet_repository,
        threshold=low_stock_threshold,
    )

    search_sweets_service = providers.Factory(
        lambda sweet_repo, limit, max_limit: __import__(
            'src.core.sweets.use_cases',
            fromlist=['SearchSweetsService']
        ).SearchSweetsService(
            sweet_repo=sweet_repo,
            default_limit=limit,
            max_limit=max_limit,
        ),
        sweet_repo=sweet_repository,
        limit=search_default_limit,
        max_limit=search_max_limit,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization).
    """
    global _container

    if _container is None:
        _container = Container()

    return _container


def reset_container() -> None:
    """Reset do container (para testes)."""
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================


def create_testing_container() -> Container:
    """
    Container para testes, sem banco.

    Sobrescreve repositório, UoW e publisher com as implementações em
    memória. Os services continuam os do Container: ``override`` vale
    para todos os providers que dependem do sobrescrito.

    Example:
        container = create_testing_container()
        container.purchase_sweet_service().execute(dto)
        container.event_publisher().published_events
    """
    from src.core.sweets.ports import InMemorySweetRepository
    from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
    from src.adapters.django_app.events.publishers import InMemoryEventPublisher

    container = Container()

    container.event_publisher.override(providers.Singleton(InMemoryEventPublisher))
    container.sweet_repository.override(providers.Singleton(InMemorySweetRepository))
    container.unit_of_work.override(
        providers.Factory(InMemoryUnitOfWork, event_publisher=container.event_publisher)
    )
    container.low_stock_threshold.override(providers.Object(10))
    container.search_default_limit.override(providers.Object(10))
    container.search_max_limit.override(providers.Object(100))

    return container
