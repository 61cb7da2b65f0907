"""
API Views JSON para o domínio de Doces.

RESTful API para o frontend do catálogo.

Endpoints:
- GET    /api/sweets/                 - Listar catálogo (público)
- POST   /api/sweets/                 - Criar doce (admin)
- GET    /api/sweets/search/          - Buscar com filtros (público)
- GET    /api/sweets/<id>/            - Obter doce (público)
- PUT    /api/sweets/<id>/            - Atualização parcial (admin)
- PATCH  /api/sweets/<id>/            - Atualização parcial (admin)
- DELETE /api/sweets/<id>/            - Remover doce (admin)
- POST   /api/inventory/purchase/     - Comprar (autenticado)
- POST   /api/inventory/restock/      - Repor estoque (admin)
- GET    /api/inventory/low-stock/    - Relatório de estoque baixo (admin)

Formato:
- Entrada: JSON
- Saída: JSON com estrutura {success, data/error, ...}

Autorização:
- Depende apenas da capacidade ``is_staff`` do usuário da sessão
- 401 para anônimo, 403 para usuário sem a capacidade
"""

import json
import logging
from functools import wraps
from typing import Any, Dict, Optional

from django.views import View
from django.http import JsonResponse, HttpRequest
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt

from src.core.sweets.dtos import (
    CreateSweetInputDTO,
    UpdateSweetInputDTO,
    StockOperationInputDTO,
    SearchSweetsQueryDTO,
)
from src.core.shared.exceptions import (
    ValidationError,
    EntityNotFoundError,
    ConflictError,
    BusinessRuleViolationError,
    InfrastructureError,
    DomainException,
)
from src.config.container import get_container

logger = logging.getLogger(__name__)

TRUE_VALUES = ('1', 'true', 'yes', 'on')


# =============================================================================
# Decorators e Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, **extra) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        **extra: Chaves adicionais no nível raiz (code, pagination, ...)
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    response.update(extra)

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValidationError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValidationError("Corpo da requisição deve ser um objeto JSON")

    return data


def get_user_id(request: HttpRequest) -> Optional[str]:
    """Extrai ID do usuário do request."""
    if request.user.is_authenticated:
        return str(request.user.pk)
    return None


def coerce_int(value, field: str):
    """
    Aceita inteiro ou string de dígitos (ex: ID vindo como "7").

    Qualquer outro valor passa adiante sem conversão para o
    use case rejeitar com a mensagem de domínio.
    """
    if isinstance(value, str):
        texto = value.strip()
        if texto.lstrip('-').isdigit():
            return int(texto)
        if not texto:
            return None
        raise ValidationError(f"{field} deve ser um número inteiro", field=field)
    return value


def query_int(request: HttpRequest, name: str, default: Optional[int] = None) -> Optional[int]:
    """Lê parâmetro inteiro da query string."""
    raw = request.GET.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} deve ser um número inteiro", field=name)


def _deny(status: int, message: str, code: str) -> JsonResponse:
    return json_response(success=False, error=message, code=code, status=status)


def require_authenticated(view_method):
    """Exige usuário autenticado (401 caso contrário)."""
    @wraps(view_method)
    def wrapper(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return _deny(401, "Autenticação necessária", "NOT_AUTHENTICATED")
        return view_method(self, request, *args, **kwargs)
    return wrapper


def require_admin(view_method):
    """Exige a capacidade de administrador (``is_staff``)."""
    @wraps(view_method)
    def wrapper(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return _deny(401, "Autenticação necessária", "NOT_AUTHENTICATED")
        if not request.user.is_staff:
            return _deny(403, "Acesso restrito a administradores", "FORBIDDEN")
        return view_method(self, request, *args, **kwargs)
    return wrapper


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Tratamento de erros padronizado
    """

    def get_container(self):
        return get_container()

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(self.get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Traduz exceções de domínio para status HTTP.

        - ValidationError → 400
        - EntityNotFoundError → 404
        - ConflictError → 409
        - BusinessRuleViolationError (ex: estoque insuficiente) → 400
        - InfrastructureError / inesperado → 500 com mensagem genérica
        """
        if isinstance(e, InfrastructureError):
            logger.error(f"Falha de infraestrutura na API: {e!r}")
            return json_response(success=False, status=500, **e.to_dict())

        if isinstance(e, EntityNotFoundError):
            return json_response(success=False, status=404, **e.to_dict())

        if isinstance(e, ConflictError):
            return json_response(success=False, status=409, **e.to_dict())

        if isinstance(e, BusinessRuleViolationError):
            logger.warning(f"Operação rejeitada: {e}")
            return json_response(success=False, status=400, **e.to_dict())

        if isinstance(e, (ValidationError, DomainException)):
            return json_response(success=False, status=400, **e.to_dict())

        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            code="INTERNAL_FAILURE",
            status=500
        )


# =============================================================================
# Sweets API Views
# =============================================================================

class SweetAPIListView(BaseAPIView):
    """
    GET /api/sweets/ - Lista catálogo
    POST /api/sweets/ - Cria doce
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            sweets = self.get_service('list_sweets_service').execute()
            return json_response(success=True, data=[s.to_dict() for s in sweets])
        except Exception as e:
            return self.handle_exception(e)

    @require_admin
    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Cria novo doce.

        Body JSON:
        {
            "name": "string (obrigatório)",
            "price": "número ou string decimal (obrigatório)",
            "description": "string (opcional)",
            "stock": inteiro >= 0 (opcional, default 0)
        }
        """
        try:
            data = self.parse_body(request)

            input_dto = CreateSweetInputDTO(
                name=data.get('name'),
                price=data.get('price'),
                description=data.get('description'),
                stock=coerce_int(data.get('stock'), 'stock'),
            )

            output = self.get_service('create_sweet_service').execute(input_dto)

            logger.info(f"API: Sweet criado: {output.id}")

            return json_response(success=True, data=output.to_dict(), status=201)

        except Exception as e:
            return self.handle_exception(e)


class SweetAPISearchView(BaseAPIView):
    """
    GET /api/sweets/search/?q=&minPrice=&maxPrice=&inStock=&page=&limit=
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            query_dto = SearchSweetsQueryDTO(
                query=request.GET.get('q'),
                min_price=request.GET.get('minPrice'),
                max_price=request.GET.get('maxPrice'),
                in_stock=request.GET.get('inStock', '').strip().lower() in TRUE_VALUES,
                page=query_int(request, 'page', 1),
                limit=query_int(request, 'limit'),
            )

            result = self.get_service('search_sweets_service').execute(query_dto)

            return json_response(success=True, **result.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class SweetAPIDetailView(BaseAPIView):
    """
    GET /api/sweets/<id>/ - Obter doce
    PUT|PATCH /api/sweets/<id>/ - Atualização parcial
    DELETE /api/sweets/<id>/ - Remover
    """

    def get(self, request: HttpRequest, pk: int) -> JsonResponse:
        try:
            sweet = self.get_service('get_sweet_service').execute(pk)
            return json_response(success=True, data=sweet.to_dict())
        except Exception as e:
            return self.handle_exception(e)

    @require_admin
    def patch(self, request: HttpRequest, pk: int) -> JsonResponse:
        """
        Atualiza doce parcialmente.

        Body JSON (todos opcionais, ao menos um):
        {"name": ..., "description": ..., "price": ..., "stock": ...}
        """
        try:
            data = self.parse_body(request)

            input_dto = UpdateSweetInputDTO(
                sweet_id=pk,
                name=data.get('name'),
                description=data.get('description'),
                price=data.get('price'),
                stock=coerce_int(data.get('stock'), 'stock'),
            )

            output = self.get_service('update_sweet_service').execute(input_dto)

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)

    put = patch

    @require_admin
    def delete(self, request: HttpRequest, pk: int) -> JsonResponse:
        try:
            result = self.get_service('delete_sweet_service').execute(pk)
            logger.info(f"API: Sweet {pk} removido")
            return json_response(success=True, data=result)
        except Exception as e:
            return self.handle_exception(e)


# =============================================================================
# Inventory API Views
# =============================================================================

class PurchaseAPIView(BaseAPIView):
    """
    POST /api/inventory/purchase/

    Body JSON: {"sweetId": int, "quantity": int > 0}
    """

    @require_authenticated
    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)

            input_dto = StockOperationInputDTO(
                sweet_id=coerce_int(data.get('sweetId'), 'sweetId'),
                quantity=data.get('quantity'),
                requested_by_id=get_user_id(request),
            )

            output = self.get_service('purchase_sweet_service').execute(input_dto)

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class RestockAPIView(BaseAPIView):
    """
    POST /api/inventory/restock/

    Body JSON: {"sweetId": int, "quantity": int > 0}
    """

    @require_admin
    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            data = self.parse_body(request)

            input_dto = StockOperationInputDTO(
                sweet_id=coerce_int(data.get('sweetId'), 'sweetId'),
                quantity=data.get('quantity'),
                requested_by_id=get_user_id(request),
            )

            output = self.get_service('restock_sweet_service').execute(input_dto)

            logger.info(f"API: Sweet {input_dto.sweet_id} reposto (+{input_dto.quantity})")

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class LowStockAPIView(BaseAPIView):
    """
    GET /api/inventory/low-stock/?threshold=
    """

    @require_admin
    def get(self, request: HttpRequest) -> JsonResponse:
        try:
            threshold = query_int(request, 'threshold')

            sweets = self.get_service('list_low_stock_service').execute(threshold)

            return json_response(
                success=True,
                data=[s.to_dict() for s in sweets],
                count=len(sweets),
            )

        except Exception as e:
            return self.handle_exception(e)
