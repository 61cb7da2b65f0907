"""
Testes de concorrência do InMemorySweetRepository.

Estratégia de Teste:
- ThreadPoolExecutor disparando compras/reposições simultâneas
- Verifica que o estoque nunca fica negativo e que o número de
  compras aceitas é exato

Coverage:
- withdraw_stock / deposit_stock sob concorrência
- PurchaseSweetService com InMemoryUnitOfWork
"""

from concurrent.futures import ThreadPoolExecutor
import threading

import pytest

from src.core.sweets.entities import SweetEntity
from src.core.sweets.dtos import StockOperationInputDTO
from src.core.sweets.use_cases import PurchaseSweetService
from src.core.shared.exceptions import InsufficientStockError
from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork


def _tentar_compra(repo, sweet_id, quantidade, barreira):
    barreira.wait()
    try:
        repo.withdraw_stock(sweet_id, quantidade)
        return True
    except InsufficientStockError:
        return False


class TestCompraConcorrente:

    def test_compras_simultaneas_nao_negativam(self, sweet_repo):
        """20 compras de 1 unidade com estoque 10: exatamente 10 aceitas."""
        sweet = sweet_repo.add(SweetEntity.create(name="Toffee", price="1.00", stock=10))
        barreira = threading.Barrier(20, timeout=10)

        with ThreadPoolExecutor(max_workers=20) as executor:
            resultados = list(executor.map(
                lambda _: _tentar_compra(sweet_repo, sweet.id, 1, barreira),
                range(20),
            ))

        assert resultados.count(True) == 10
        assert sweet_repo.get_by_id(sweet.id).stock == 0

    def test_compras_e_reposicoes_intercaladas(self, sweet_repo):
        """Saldo final = inicial - compras aceitas + reposições."""
        sweet = sweet_repo.add(SweetEntity.create(name="Toffee", price="1.00", stock=5))

        def compra(_):
            try:
                sweet_repo.withdraw_stock(sweet.id, 2)
                return 2
            except InsufficientStockError:
                return 0

        def reposicao(_):
            sweet_repo.deposit_stock(sweet.id, 1)
            return 1

        with ThreadPoolExecutor(max_workers=8) as executor:
            vendidos = executor.map(compra, range(30))
            repostos = executor.map(reposicao, range(30))
            total_vendido = sum(vendidos)
            total_reposto = sum(repostos)

        final = sweet_repo.get_by_id(sweet.id).stock
        assert final >= 0
        assert final == 5 - total_vendido + total_reposto

    def test_doces_diferentes_nao_interferem(self, sweet_repo):
        a = sweet_repo.add(SweetEntity.create(name="A", price="1.00", stock=100))
        b = sweet_repo.add(SweetEntity.create(name="B", price="1.00", stock=100))

        with ThreadPoolExecutor(max_workers=10) as executor:
            list(executor.map(
                lambda i: sweet_repo.withdraw_stock(a.id if i % 2 else b.id, 1),
                range(100),
            ))

        assert sweet_repo.get_by_id(a.id).stock == 50
        assert sweet_repo.get_by_id(b.id).stock == 50

    @pytest.mark.slow
    def test_servico_de_compra_concorrente(self, sweet_repo):
        """Via use case: eventos publicados apenas das compras aceitas."""
        sweet = sweet_repo.add(SweetEntity.create(name="Toffee", price="1.00", stock=7))
        uows = [InMemoryUnitOfWork() for _ in range(15)]

        def comprar(uow):
            try:
                PurchaseSweetService(sweet_repo, uow).execute(
                    StockOperationInputDTO(sweet_id=sweet.id, quantity=1)
                )
                return True
            except InsufficientStockError:
                return False

        with ThreadPoolExecutor(max_workers=15) as executor:
            aceitas = sum(executor.map(comprar, uows))

        assert aceitas == 7
        assert sum(len(u.published_events) for u in uows) == 7
        assert sum(1 for u in uows if u.rolled_back) == 8
