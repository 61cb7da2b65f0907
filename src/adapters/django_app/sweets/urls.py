"""
URL patterns para o domínio de Doces.

Endpoints API JSON (montados em /api/):
- GET|POST /api/sweets/
- GET /api/sweets/search/
- GET|PUT|PATCH|DELETE /api/sweets/<id>/
- POST /api/inventory/purchase/
- POST /api/inventory/restock/
- GET /api/inventory/low-stock/
"""

from django.urls import path
from . import api_views

app_name = 'sweets'

urlpatterns = [
    # =========================================================================
    # Catálogo
    # =========================================================================

    # Listagem e criação
    path('sweets/', api_views.SweetAPIListView.as_view(), name='api_list'),

    # Busca (antes do <pk> para não conflitar)
    path('sweets/search/', api_views.SweetAPISearchView.as_view(), name='api_search'),

    # Detalhes, atualização e remoção
    path('sweets/<int:pk>/', api_views.SweetAPIDetailView.as_view(), name='api_detail'),

    # =========================================================================
    # Estoque
    # =========================================================================

    path('inventory/purchase/', api_views.PurchaseAPIView.as_view(), name='api_purchase'),
    path('inventory/restock/', api_views.RestockAPIView.as_view(), name='api_restock'),
    path('inventory/low-stock/', api_views.LowStockAPIView.as_view(), name='api_low_stock'),
]
