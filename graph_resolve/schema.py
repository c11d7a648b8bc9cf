from typing import Type, Optional, Dict, List
from pydantic import BaseModel, model_validator, Field

import graph_resolve.constant as const
from graph_resolve.exceptions import UnknownEntityError


class Relationship(BaseModel):
    name: str  # exposed field name, eg: books
    target: str  # target entity name
    field: str  # key on the owning instance

    # key on the target instance, defaults to target entity's key
    target_field: Optional[str] = None

    # True: one-to-many, resolves to a list
    # False: one-to-one, resolves to an object or None
    load_many: bool = False


class Entity(BaseModel):
    name: str
    kls: Type[BaseModel]  # declares the scalar fields
    key: str = const.DEFAULT_KEY
    relationships: List[Relationship] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_fields(self) -> "Entity":
        scalars = self.kls.model_fields

        if self.key not in scalars:
            raise ValueError(f'key "{self.key}" is not a field of {self.kls.__name__}')

        seen = set()
        for rel in self.relationships:
            if rel.name in seen:
                raise ValueError(f'Duplicate relationship detected on {self.name}: {rel.name!r}')
            seen.add(rel.name)

            if rel.name in scalars:
                raise ValueError(f'relationship {rel.name!r} shadows a field of {self.kls.__name__}')
            if rel.field not in scalars:
                raise ValueError(f'relationship {rel.name!r} uses "{rel.field}", which is not a field of {self.kls.__name__}')
        return self

    @property
    def scalar_fields(self) -> List[str]:
        return list(self.kls.model_fields.keys())

    def get_relationship(self, name: str) -> Optional[Relationship]:
        for rel in self.relationships:
            if rel.name == name:
                return rel
        return None

    def has_field(self, name: str) -> bool:
        return name in self.kls.model_fields or self.get_relationship(name) is not None


class Schema(BaseModel):
    """
    Statically declared entity types and their relationships.

    Build it once at startup, it is treated as immutable afterwards.

    ```python
    schema = Schema(entities=[
        Entity(name='Author', kls=Author, relationships=[
            Relationship(name='books', target='Book', field='id', target_field='author_id', load_many=True),
        ]),
        Entity(name='Book', kls=Book, relationships=[
            Relationship(name='author', target='Author', field='author_id'),
        ]),
    ])
    ```
    """
    entities: List[Entity]
    description: Optional[str] = None

    @model_validator(mode="after")
    def _validate_entities(self) -> "Schema":
        entity_map: Dict[str, Entity] = {}
        for entity in self.entities:
            if entity.name in entity_map:
                raise ValueError(f"Duplicate entity name detected: {entity.name}")
            entity_map[entity.name] = entity

        for entity in self.entities:
            for rel in entity.relationships:
                target = entity_map.get(rel.target)
                if target is None:
                    raise ValueError(f'relationship {entity.name}.{rel.name} targets unknown entity "{rel.target}"')

                target_field = rel.target_field or target.key
                if target_field not in target.kls.model_fields:
                    raise ValueError(f'relationship {entity.name}.{rel.name} uses "{target_field}", which is not a field of {target.kls.__name__}')
        return self

    def get_entity(self, name: str) -> Entity:
        for entity in self.entities:
            if entity.name == name:
                return entity
        raise UnknownEntityError(f'entity "{name}" not found')

    def get_target_field(self, rel: Relationship) -> str:
        return rel.target_field or self.get_entity(rel.target).key
