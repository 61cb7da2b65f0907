"""
Exceções de Domínio do catálogo de doces.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Hierarquia:
    DomainException (base)
    ├── ValidationError (validação de entrada)
    ├── EntityNotFoundError (entidade não existe)
    ├── ConflictError (violação de unicidade)
    ├── BusinessRuleViolationError (regra de negócio violada)
    │   └── InsufficientStockError (estoque insuficiente)
    └── InfrastructureError (falha do mecanismo de persistência)
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            service.execute(sweet_id, quantity)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.message,
            "code": self.code,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Lançada quando dados fornecidos não atendem aos requisitos
    mínimos para processamento (campo ausente, preço negativo,
    quantidade não positiva).

    Example:
        if not name.strip():
            raise ValidationError("Nome é obrigatório", field="name")
    """

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Lançada quando uma busca por ID não retorna resultado.

    Example:
        sweet = repo.get_by_id(sweet_id)
        if not sweet:
            raise EntityNotFoundError(f"Doce {sweet_id} não encontrado")
    """

    def __init__(self, message: str, entity_type: str = None, entity_id=None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id is not None:
            result["entity_id"] = self.entity_id
        return result


class ConflictError(DomainException):
    """
    Conflito com estado existente (restrição de unicidade).

    Lançada quando uma criação ou renomeação colide com um
    registro já existente.

    Example:
        if repo.exists_by_name(name):
            raise ConflictError("Já existe um doce com este nome",
                                field="name", value=name)
    """

    def __init__(self, message: str, field: str = None, value=None):
        self.field = field
        self.value = value
        super().__init__(message, "CONFLICT")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
            result["value"] = self.value
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    Lançada quando uma operação viola uma regra de negócio
    estabelecida no domínio.
    """

    def __init__(self, message: str, rule: str = None, code: str = None):
        self.rule = rule
        super().__init__(message, code or "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class InsufficientStockError(BusinessRuleViolationError):
    """
    Estoque insuficiente para a compra solicitada.

    Carrega o estoque disponível e a quantidade pedida para que o
    chamador possa decidir o que fazer (reduzir a quantidade ou
    aguardar reposição). Não é reprocessada internamente.
    """

    def __init__(self, sweet_id, available: int, requested: int):
        self.sweet_id = sweet_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Estoque insuficiente: disponível {available}, solicitado {requested}",
            rule="estoque_nao_negativo",
            code="INSUFFICIENT_STOCK",
        )

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["available"] = self.available
        result["requested"] = self.requested
        return result


class InfrastructureError(DomainException):
    """
    Falha no colaborador de persistência (conexão, timeout, etc).

    A mensagem é sempre genérica; detalhes ficam apenas no log.
    É a única categoria que o chamador pode razoavelmente repetir.
    """

    def __init__(self, message: str = "Falha interna de persistência"):
        super().__init__(message, "INTERNAL_FAILURE")
