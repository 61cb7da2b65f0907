"""
Django Admin para o domínio de Doces.

Configuração do admin para gerenciamento do catálogo via interface web.
"""

from django.contrib import admin
from django.utils.html import format_html
from django.conf import settings

from .models import SweetModel


@admin.register(SweetModel)
class SweetAdmin(admin.ModelAdmin):
    """Admin para SweetModel."""

    list_display = [
        'id',
        'name',
        'price',
        'stock_badge',
        'created_at',
    ]

    list_filter = [
        'created_at',
    ]

    search_fields = [
        'name',
        'description',
    ]

    readonly_fields = [
        'id',
        'created_at',
        'updated_at',
    ]

    fieldsets = [
        ('Identificação', {
            'fields': ['id', 'name', 'description'],
        }),
        ('Venda', {
            'fields': ['price', 'stock'],
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse'],
        }),
    ]

    ordering = ['-created_at', '-id']

    date_hierarchy = 'created_at'

    def stock_badge(self, obj):
        """Exibe estoque com badge colorido (vermelho se baixo)."""
        limite = getattr(settings, 'LOW_STOCK_THRESHOLD', 10)
        color = '#dc3545' if obj.stock <= limite else '#28a745'
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 8px; '
            'border-radius: 3px; font-size: 11px;">{}</span>',
            color,
            obj.stock
        )
    stock_badge.short_description = 'Estoque'
    stock_badge.admin_order_field = 'stock'
