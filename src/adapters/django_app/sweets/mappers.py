"""
Mappers para conversão entre SweetEntity (Core) e SweetModel (Django).

Mappers são stateless e não contêm lógica de negócio.
"""

from src.core.sweets.entities import SweetEntity

from .models import SweetModel


class SweetMapper:
    """
    Mapper para conversão entre SweetEntity e SweetModel.

    Responsável por:
    - to_model(): Entity → Model
    - to_entity(): Model → Entity
    """

    @staticmethod
    def to_model(entity: SweetEntity) -> SweetModel:
        """
        Converte SweetEntity para SweetModel.

        Note:
            Não chama .save() - deixa isso para o Repository
        """
        return SweetModel(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            price=entity.price,
            stock=entity.stock,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    @staticmethod
    def to_entity(model: SweetModel) -> SweetEntity:
        """
        Converte SweetModel para SweetEntity.

        Note:
            Bypassa validações do factory method .create()
            pois dados já foram validados na criação original
        """
        return SweetEntity(
            id=model.id,
            name=model.name,
            description=model.description or '',
            price=model.price,
            stock=model.stock,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def update_model(model: SweetModel, entity: SweetEntity) -> SweetModel:
        """Copia os campos mutáveis da Entity para o Model (não salva)."""
        model.name = entity.name
        model.description = entity.description
        model.price = entity.price
        model.stock = entity.stock
        model.updated_at = entity.updated_at
        return model
