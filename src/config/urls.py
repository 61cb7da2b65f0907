"""
URL Configuration para o Sweet Shop.

Estrutura:
- /admin/ - Django Admin
- /api/ - API JSON de catálogo e estoque
- /health/ - Health check (banco)
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include

from src.adapters.django_app.shared.database import check_database_connection


def health(request):
    """Retorna 200 com o banco acessível, 503 caso contrário."""
    database = check_database_connection()
    status = 'ok' if database['healthy'] else 'degraded'
    return JsonResponse(
        {'status': status, 'database': database},
        status=200 if database['healthy'] else 503,
    )


urlpatterns = [
    # Django Admin
    path('admin/', admin.site.urls),

    # Catálogo e estoque
    path('api/', include('src.adapters.django_app.sweets.urls')),

    # Health check
    path('health/', health, name='health'),
]
