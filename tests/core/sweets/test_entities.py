"""
Testes Unitários para a entidade SweetEntity.

Estratégia de Teste:
- Entidade pura, sem repositório
- Cenários de sucesso e de erro para cada validação

Coverage:
- SweetEntity.create
- validate_price / validate_stock / validate_quantity
- apply_update
- remove_stock / add_stock
- is_low_stock / in_stock
- Identidade (__eq__ / __hash__)
"""

from decimal import Decimal

import pytest

from src.core.sweets.entities import SweetEntity
from src.core.shared.exceptions import ValidationError, InsufficientStockError


class TestCriarSweet:
    """Testes do factory method create."""

    def test_criar_sweet_sucesso(self):
        """Deve criar doce com campos normalizados."""
        sweet = SweetEntity.create(
            name="  Chocolate Bar  ",
            price="2.99",
            description="Milk chocolate",
            stock=50,
        )

        assert sweet.id is None
        assert sweet.name == "Chocolate Bar"
        assert sweet.price == Decimal("2.99")
        assert sweet.stock == 50
        assert sweet.created_at == sweet.updated_at

    def test_criar_sweet_defaults(self):
        """Descrição e estoque ausentes viram "" e 0."""
        sweet = SweetEntity.create(name="Toffee", price=1)

        assert sweet.description == ""
        assert sweet.stock == 0
        assert sweet.price == Decimal("1.00")

    def test_criar_sweet_preco_float_sem_erro_binario(self):
        """Float 2.99 vira exatamente Decimal('2.99')."""
        sweet = SweetEntity.create(name="Toffee", price=2.99)

        assert sweet.price == Decimal("2.99")

    def test_criar_sweet_preco_arredonda_duas_casas(self):
        """Preço é armazenado com duas casas decimais."""
        sweet = SweetEntity.create(name="Toffee", price="1.005")

        assert sweet.price == Decimal("1.01")

    def test_criar_sweet_preco_zero_permitido(self):
        """Preço zero é válido."""
        sweet = SweetEntity.create(name="Amostra", price="0")

        assert sweet.price == Decimal("0.00")

    @pytest.mark.parametrize("nome", ["", "   ", None, 123])
    def test_criar_sweet_nome_invalido(self, nome):
        """Nome vazio ou não textual deve falhar."""
        with pytest.raises(ValidationError) as exc_info:
            SweetEntity.create(name=nome, price="1.00")

        assert exc_info.value.field == "name"

    def test_criar_sweet_nome_muito_longo(self):
        """Nome acima de 200 caracteres deve falhar."""
        with pytest.raises(ValidationError):
            SweetEntity.create(name="x" * 201, price="1.00")

    @pytest.mark.parametrize("preco", [None, "-0.01", "abc", True, "NaN", "Infinity"])
    def test_criar_sweet_preco_invalido(self, preco):
        """Preço ausente, negativo ou não numérico deve falhar."""
        with pytest.raises(ValidationError) as exc_info:
            SweetEntity.create(name="Toffee", price=preco)

        assert exc_info.value.field == "price"

    @pytest.mark.parametrize("estoque", [-1, 1.5, "10", False])
    def test_criar_sweet_estoque_invalido(self, estoque):
        """Estoque negativo ou não inteiro deve falhar."""
        with pytest.raises(ValidationError) as exc_info:
            SweetEntity.create(name="Toffee", price="1.00", stock=estoque)

        assert exc_info.value.field == "stock"


class TestMovimentacaoEstoque:
    """Testes de compra e reposição na entidade."""

    @pytest.fixture
    def sweet(self):
        sweet = SweetEntity.create(name="Chocolate Bar", price="2.99", stock=50)
        sweet.id = 1
        return sweet

    def test_remove_stock_sucesso(self, sweet):
        """50 - 3 = 47."""
        sweet.remove_stock(3)

        assert sweet.stock == 47

    def test_remove_stock_ate_zero(self, sweet):
        """Comprar exatamente o estoque disponível zera o estoque."""
        sweet.remove_stock(50)

        assert sweet.stock == 0
        assert not sweet.in_stock

    def test_remove_stock_insuficiente(self, sweet):
        """Quantidade maior que o estoque falha sem alterar nada."""
        with pytest.raises(InsufficientStockError) as exc_info:
            sweet.remove_stock(51)

        assert exc_info.value.available == 50
        assert exc_info.value.requested == 51
        assert sweet.stock == 50

    @pytest.mark.parametrize("quantidade", [0, -5, None, 2.0, True])
    def test_quantidade_invalida(self, sweet, quantidade):
        """Quantidade deve ser inteiro positivo."""
        with pytest.raises(ValidationError) as exc_info:
            sweet.remove_stock(quantidade)

        assert exc_info.value.field == "quantity"
        assert sweet.stock == 50

    def test_add_stock(self, sweet):
        """Reposição soma ao estoque e atualiza updated_at."""
        anterior = sweet.updated_at

        sweet.add_stock(22)

        assert sweet.stock == 72
        assert sweet.updated_at >= anterior

    def test_add_stock_quantidade_invalida(self, sweet):
        with pytest.raises(ValidationError):
            sweet.add_stock(0)

    def test_quantidade_acima_do_maximo(self, sweet):
        with pytest.raises(ValidationError) as exc_info:
            sweet.add_stock(2 ** 63)

        assert exc_info.value.field == "quantity"
        assert sweet.stock == 50

    def test_add_stock_estouraria_o_maximo(self, sweet):
        """Saldo final acima de STOCK_MAX é rejeitado sem alterar o estoque."""
        with pytest.raises(ValidationError) as exc_info:
            sweet.add_stock(SweetEntity.STOCK_MAX - 49)

        assert exc_info.value.field == "quantity"
        assert sweet.stock == 50

    def test_add_stock_ate_o_maximo(self, sweet):
        sweet.add_stock(SweetEntity.STOCK_MAX - 50)

        assert sweet.stock == SweetEntity.STOCK_MAX


class TestAtualizacaoParcial:
    """Testes de apply_update."""

    def test_atualiza_apenas_campos_informados(self):
        """Campos None mantêm o valor atual."""
        sweet = SweetEntity.create(
            name="Caramel Candy", price="2.50", description="Soft", stock=25
        )

        sweet.apply_update(price="2.75")

        assert sweet.price == Decimal("2.75")
        assert sweet.name == "Caramel Candy"
        assert sweet.description == "Soft"
        assert sweet.stock == 25

    def test_falha_nao_altera_entidade(self):
        """Valor inválido em um campo não aplica os demais."""
        sweet = SweetEntity.create(name="Caramel Candy", price="2.50", stock=25)

        with pytest.raises(ValidationError):
            sweet.apply_update(name="Novo Nome", price="-1")

        assert sweet.name == "Caramel Candy"
        assert sweet.price == Decimal("2.50")


class TestEstoqueBaixoEIdentidade:

    def test_is_low_stock_inclusivo(self):
        """Estoque igual ao limite conta como baixo."""
        sweet = SweetEntity.create(name="Toffee", price="1.00", stock=10)

        assert sweet.is_low_stock(10)
        assert not sweet.is_low_stock(9)

    def test_igualdade_por_id(self):
        """Entidades com mesmo ID são iguais."""
        a = SweetEntity(id=1, name="A")
        b = SweetEntity(id=1, name="B")

        assert a == b
        assert hash(a) == hash(b)

    def test_sem_id_igualdade_por_instancia(self):
        a = SweetEntity(name="A")
        b = SweetEntity(name="A")

        assert a != b
        assert a == a

    def test_copy_independente(self):
        """Alterar a cópia não altera o original."""
        original = SweetEntity.create(name="Toffee", price="1.00", stock=5)
        copia = original.copy()

        copia.remove_stock(5)

        assert original.stock == 5
