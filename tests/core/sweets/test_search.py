"""
Testes da busca com filtros e paginação do catálogo.

Estratégia de Teste:
- Catálogo de referência com 5 doces (fixture catalog_sample)
- SearchSweetsService sobre InMemorySweetRepository
- Filtros combinados, limites de paginação e entradas inválidas

Coverage:
- SweetSearchCriteria (build/matches)
- validate_page / paginate / total_pages
- SearchSweetsService
"""

from decimal import Decimal

import pytest

from src.core.sweets.dtos import SearchSweetsQueryDTO
from src.core.sweets.search import (
    SweetSearchCriteria,
    paginate,
    total_pages,
    validate_page,
)
from src.core.sweets.use_cases import SearchSweetsService
from src.core.shared.exceptions import ValidationError


@pytest.fixture
def service(sweet_repo, catalog_sample):
    return SearchSweetsService(sweet_repo)


def _nomes(result):
    return sorted(item.name for item in result.items)


class TestSweetSearchCriteria:

    def test_build_query_vazia_vira_none(self):
        """Query só com espaços equivale a nenhum filtro."""
        criteria = SweetSearchCriteria.build(query="   ")

        assert criteria.query is None
        assert criteria.is_empty

    def test_build_converte_precos(self):
        criteria = SweetSearchCriteria.build(min_price="3.00", max_price=4)

        assert criteria.min_price == Decimal("3.00")
        assert criteria.max_price == Decimal("4")

    def test_build_preco_negativo(self):
        """Limite de preço negativo é rejeitado."""
        with pytest.raises(ValidationError) as exc_info:
            SweetSearchCriteria.build(min_price="-1")

        assert exc_info.value.field == "minPrice"

    def test_build_preco_nao_numerico(self):
        with pytest.raises(ValidationError):
            SweetSearchCriteria.build(max_price="barato")

    def test_matches_case_insensitive_na_descricao(self, catalog_sample):
        """O termo pode casar só com a descrição."""
        criteria = SweetSearchCriteria.build(query="COCOA")

        casados = criteria.apply(catalog_sample)

        assert [s.name for s in casados] == ["Dark Chocolate"]


class TestPaginacao:

    def test_paginate_recorte(self):
        itens, total = paginate(list(range(25)), page=3, limit=10)

        assert itens == list(range(20, 25))
        assert total == 25

    def test_paginate_alem_do_fim(self):
        itens, total = paginate(list(range(5)), page=4, limit=2)

        assert itens == []
        assert total == 5

    @pytest.mark.parametrize("total,limit,esperado", [(0, 10, 0), (3, 2, 2), (10, 10, 1), (11, 10, 2)])
    def test_total_pages(self, total, limit, esperado):
        assert total_pages(total, limit) == esperado

    @pytest.mark.parametrize("page,limit", [(0, 10), (-1, 10), (1, 0), (1, 101), ("1", 10), (1, True)])
    def test_validate_page_invalido(self, page, limit):
        with pytest.raises(ValidationError):
            validate_page(page, limit)

    def test_validate_page_respeita_max_limit(self):
        """O teto de itens por página é configurável."""
        assert validate_page(1, 50, max_limit=50) == (1, 50)

        with pytest.raises(ValidationError):
            validate_page(1, 51, max_limit=50)


class TestSearchSweetsService:

    def test_busca_por_texto(self, service):
        """'chocolate' casa com 3 doces (nome ou descrição)."""
        result = service.execute(SearchSweetsQueryDTO(query="chocolate"))

        assert result.total == 3
        assert _nomes(result) == ["Chocolate Bar", "Dark Chocolate", "Mint Chocolate"]

    def test_busca_por_faixa_de_preco(self, service):
        """Faixa 3.00-4.00 inclusiva: Dark Chocolate e Mint Chocolate."""
        result = service.execute(
            SearchSweetsQueryDTO(min_price="3.00", max_price="4.00")
        )

        assert _nomes(result) == ["Dark Chocolate", "Mint Chocolate"]

    def test_busca_limites_inclusivos(self, service):
        result = service.execute(
            SearchSweetsQueryDTO(min_price="1.99", max_price="1.99")
        )

        assert _nomes(result) == ["Gummy Bears"]

    def test_busca_paginada(self, service):
        """Página 1 com limite 2: 2 itens, total 3, 2 páginas."""
        result = service.execute(
            SearchSweetsQueryDTO(query="chocolate", page=1, limit=2)
        )

        assert len(result.items) == 2
        assert result.total == 3
        assert result.total_pages == 2
        assert result.has_next

        segunda = service.execute(
            SearchSweetsQueryDTO(query="chocolate", page=2, limit=2)
        )
        assert len(segunda.items) == 1
        assert not segunda.has_next

    def test_pagina_alem_do_fim_vazia(self, service):
        """Página além do fim devolve lista vazia, não erro."""
        result = service.execute(
            SearchSweetsQueryDTO(query="chocolate", page=5, limit=2)
        )

        assert result.items == []
        assert result.total == 3

    def test_sem_filtros_retorna_catalogo(self, service):
        result = service.execute(SearchSweetsQueryDTO())

        assert result.total == 5
        assert result.limit == 10

    def test_ordem_mais_recente_primeiro(self, service):
        result = service.execute(SearchSweetsQueryDTO())

        assert result.items[0].name == "Mint Chocolate"
        assert result.items[-1].name == "Chocolate Bar"

    def test_min_maior_que_max_retorna_vazio(self, service):
        """min > max não é erro: apenas não casa nada."""
        result = service.execute(
            SearchSweetsQueryDTO(min_price="5.00", max_price="1.00")
        )

        assert result.items == []
        assert result.total == 0
        assert result.total_pages == 0

    def test_apenas_em_estoque(self, service, sweet_repo, catalog_sample):
        """inStock exclui doces com estoque zero."""
        sweet_repo.withdraw_stock(catalog_sample[3].id, 25)

        result = service.execute(SearchSweetsQueryDTO(in_stock=True))

        assert result.total == 4
        assert "Caramel Candy" not in _nomes(result)

    def test_filtros_combinados(self, service):
        """Texto e faixa de preço são combinados com AND."""
        result = service.execute(
            SearchSweetsQueryDTO(query="chocolate", max_price="3.00")
        )

        assert _nomes(result) == ["Chocolate Bar"]

    @pytest.mark.parametrize("dto", [
        SearchSweetsQueryDTO(page=0),
        SearchSweetsQueryDTO(limit=0),
        SearchSweetsQueryDTO(limit=1000),
        SearchSweetsQueryDTO(min_price="-5"),
    ])
    def test_parametros_invalidos(self, service, dto):
        with pytest.raises(ValidationError):
            service.execute(dto)

    def test_limite_padrao_configuravel(self, sweet_repo, catalog_sample):
        service = SearchSweetsService(sweet_repo, default_limit=2, max_limit=4)

        result = service.execute(SearchSweetsQueryDTO())

        assert result.limit == 2
        assert result.total_pages == 3
        with pytest.raises(ValidationError):
            service.execute(SearchSweetsQueryDTO(limit=5))

    def test_to_dict_formato_paginado(self, service):
        payload = service.execute(
            SearchSweetsQueryDTO(query="chocolate", limit=2)
        ).to_dict()

        assert payload["pagination"] == {
            "total": 3,
            "page": 1,
            "limit": 2,
            "totalPages": 2,
        }
        assert payload["data"][0]["price"] in {"2.99", "3.99", "3.50"}
