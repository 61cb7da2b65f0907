"""
Django Models para o domínio de Doces.

Estes models são ADAPTERS - implementam a persistência para a
entidade de domínio definida em src/core/sweets/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers

Regras repetidas no banco: nome UNIQUE e CHECK ``stock >= 0``.
"""

from django.db import models
from django.utils import timezone


class SweetModel(models.Model):
    """
    Model Django para persistência de Doces.

    Fields:
        id: Inteiro auto-incremento (atribuído pelo banco)
        name: Nome único no catálogo
        description: Descrição livre
        price: Preço com duas casas decimais
        stock: Quantidade disponível (nunca negativa)
        created_at: Timestamp de criação
        updated_at: Timestamp de última atualização
    """

    id = models.BigAutoField(primary_key=True)

    name = models.CharField(
        max_length=200,
        unique=True,
        help_text="Nome único do doce"
    )

    description = models.TextField(
        blank=True,
        default='',
        help_text="Descrição do doce"
    )

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Preço unitário"
    )

    stock = models.PositiveIntegerField(
        default=0,
        db_index=True,
        help_text="Quantidade disponível em estoque"
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Data/hora de criação"
    )

    updated_at = models.DateTimeField(
        default=timezone.now,
        help_text="Data/hora da última atualização"
    )

    class Meta:
        db_table = 'sweets'
        verbose_name = 'Doce'
        verbose_name_plural = 'Doces'
        ordering = ['-created_at', '-id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name='sweets_stock_non_negative',
            ),
        ]

    def __str__(self):
        return f"[{self.id}] {self.name}"

    def __repr__(self):
        return f"<SweetModel id={self.id} stock={self.stock}>"
