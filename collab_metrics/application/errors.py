class EntityNotFoundError(ValueError):
    """対象のエンティティが存在しない"""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id
