"""
Entidades do Domínio de Doces.

Este módulo define a entidade de domínio que encapsula as regras
de negócio do catálogo de doces.

Regras de Negócio Encapsuladas:
- Nome obrigatório e não vazio
- Preço decimal não negativo com duas casas
- Estoque inteiro nunca negativo
- Compra só é possível se houver estoque suficiente
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import ClassVar, Optional

from src.core.shared.exceptions import (
    ValidationError,
    InsufficientStockError,
)


def _agora() -> datetime:
    return datetime.now(timezone.utc)


CENTAVOS = Decimal("0.01")


@dataclass
class SweetEntity:
    """
    Entidade de Domínio: Doce.

    Invariantes:
    - name não vazio (espaços nas pontas são removidos)
    - price >= 0, sempre com duas casas decimais
    - stock >= 0 em qualquer momento

    O ``id`` é atribuído pelo repositório na inclusão e não muda depois.

    Attributes:
        id: Identificador inteiro (None até ser persistido)
        name: Nome único no catálogo (comparação exata)
        description: Descrição livre
        price: Preço unitário (Decimal)
        stock: Quantidade disponível
        created_at: Data/hora de criação (UTC)
        updated_at: Data/hora da última alteração (UTC)

    Example:
        sweet = SweetEntity.create(name="Chocolate Bar", price="2.99", stock=50)
        sweet.remove_stock(3)
        sweet.stock  # 47
    """

    id: Optional[int] = None
    name: str = ""
    description: str = ""
    price: Decimal = field(default_factory=lambda: Decimal("0.00"))
    stock: int = 0
    created_at: datetime = field(default_factory=_agora)
    updated_at: datetime = field(default_factory=_agora)

    NAME_MAX_LENGTH: ClassVar[int] = 200
    PRICE_MAX: ClassVar[Decimal] = Decimal("99999999.99")
    # limite de PositiveIntegerField em todos os bancos suportados
    STOCK_MAX: ClassVar[int] = 2147483647

    @classmethod
    def create(
        cls,
        name: str,
        price,
        description: Optional[str] = None,
        stock: Optional[int] = None,
    ) -> "SweetEntity":
        """
        Factory method para criar doce com validações.

        Args:
            name: Nome do doce
            price: Preço (Decimal, int, float ou string numérica)
            description: Descrição opcional (default: "")
            stock: Estoque inicial opcional (default: 0)

        Returns:
            Nova instância sem ``id``

        Raises:
            ValidationError: Se algum campo for inválido
        """
        agora = _agora()
        return cls(
            name=cls.validate_name(name),
            description=cls.validate_description(description),
            price=cls.validate_price(price),
            stock=cls.validate_stock(0 if stock is None else stock),
            created_at=agora,
            updated_at=agora,
        )

    # =========================================================================
    # Validações
    # =========================================================================

    @classmethod
    def validate_name(cls, name) -> str:
        """Valida e normaliza o nome."""
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Nome é obrigatório", field="name")

        nome_limpo = name.strip()

        if len(nome_limpo) > cls.NAME_MAX_LENGTH:
            raise ValidationError(
                f"Nome deve ter no máximo {cls.NAME_MAX_LENGTH} caracteres",
                field="name"
            )

        return nome_limpo

    @classmethod
    def validate_description(cls, description) -> str:
        """Descrição ausente vira string vazia."""
        if description is None:
            return ""
        if not isinstance(description, str):
            raise ValidationError("Descrição deve ser texto", field="description")
        return description

    @classmethod
    def validate_price(cls, price) -> Decimal:
        """
        Converte e valida o preço.

        Floats passam por ``str`` antes de virar Decimal para não
        carregar o erro de representação binária (2.99 -> "2.99").
        """
        if price is None or isinstance(price, bool):
            raise ValidationError("Preço é obrigatório", field="price")

        try:
            valor = price if isinstance(price, Decimal) else Decimal(str(price).strip())
        except (InvalidOperation, ValueError, TypeError):
            raise ValidationError(f"Preço inválido: {price!r}", field="price")

        if not valor.is_finite():
            raise ValidationError(f"Preço inválido: {price!r}", field="price")

        if valor < 0:
            raise ValidationError("Preço não pode ser negativo", field="price")

        if valor > cls.PRICE_MAX:
            raise ValidationError(
                f"Preço deve ser no máximo {cls.PRICE_MAX}",
                field="price"
            )

        return valor.quantize(CENTAVOS, rounding=ROUND_HALF_UP)

    @classmethod
    def validate_stock(cls, stock) -> int:
        """Estoque deve ser inteiro >= 0."""
        if isinstance(stock, bool) or not isinstance(stock, int):
            raise ValidationError("Estoque deve ser um número inteiro", field="stock")
        if stock < 0:
            raise ValidationError("Estoque não pode ser negativo", field="stock")
        if stock > cls.STOCK_MAX:
            raise ValidationError(f"Estoque deve ser no máximo {cls.STOCK_MAX}", field="stock")
        return stock

    @classmethod
    def validate_quantity(cls, quantity) -> int:
        """
        Valida quantidade de compra/reposição.

        Raises:
            ValidationError: Se ausente, não inteira, não positiva ou acima de STOCK_MAX
        """
        if quantity is None:
            raise ValidationError("Quantidade é obrigatória", field="quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValidationError("Quantidade deve ser um número inteiro", field="quantity")
        if quantity <= 0:
            raise ValidationError("Quantidade deve ser maior que zero", field="quantity")
        if quantity > cls.STOCK_MAX:
            raise ValidationError(
                f"Quantidade deve ser no máximo {cls.STOCK_MAX}", field="quantity"
            )
        return quantity

    # =========================================================================
    # Comportamento
    # =========================================================================

    def apply_update(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        price=None,
        stock: Optional[int] = None,
    ) -> None:
        """
        Atualização parcial: campos None mantêm o valor atual.

        Todos os valores são validados antes de qualquer atribuição,
        então uma falha não deixa a entidade meio alterada.
        """
        novo_nome = self.validate_name(name) if name is not None else self.name
        nova_descricao = (
            self.validate_description(description)
            if description is not None else self.description
        )
        novo_preco = self.validate_price(price) if price is not None else self.price
        novo_estoque = self.validate_stock(stock) if stock is not None else self.stock

        self.name = novo_nome
        self.description = nova_descricao
        self.price = novo_preco
        self.stock = novo_estoque
        self._touch()

    def remove_stock(self, quantity: int) -> None:
        """
        Retira unidades do estoque (compra).

        Raises:
            ValidationError: Se quantidade inválida
            InsufficientStockError: Se stock < quantity
        """
        quantity = self.validate_quantity(quantity)

        if self.stock < quantity:
            raise InsufficientStockError(
                sweet_id=self.id,
                available=self.stock,
                requested=quantity,
            )

        self.stock -= quantity
        self._touch()

    def add_stock(self, quantity: int) -> None:
        """
        Repõe unidades no estoque.

        Raises:
            ValidationError: Se o saldo passaria de STOCK_MAX
        """
        quantity = self.validate_quantity(quantity)
        if self.stock + quantity > self.STOCK_MAX:
            raise ValidationError(
                f"Estoque resultante excede o máximo de {self.STOCK_MAX}",
                field="quantity",
            )
        self.stock += quantity
        self._touch()

    def _touch(self) -> None:
        self.updated_at = _agora()

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    def is_low_stock(self, threshold: int) -> bool:
        """Estoque baixo: igual ou abaixo do limite."""
        return self.stock <= threshold

    def copy(self) -> "SweetEntity":
        """Cópia independente (nenhum campo é mutável por referência)."""
        return replace(self)

    def __repr__(self) -> str:
        return (
            f"SweetEntity("
            f"id={self.id}, "
            f"name='{self.name[:20]}', "
            f"price={self.price}, "
            f"stock={self.stock}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        """Comparação por ID (identidade de entidade)."""
        if not isinstance(other, SweetEntity):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else id(self)
