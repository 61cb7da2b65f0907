"""
Configuração do Django App para Doces.
"""

from django.apps import AppConfig


class SweetsConfig(AppConfig):
    """Configuração do app Sweets."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.sweets'
    label = 'sweets'
    verbose_name = 'Catálogo de Doces'
