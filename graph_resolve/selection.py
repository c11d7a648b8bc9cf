from __future__ import annotations
from typing import Any, Dict, Iterator, Optional, Tuple, Type, Union
from pydantic import BaseModel

from graph_resolve.schema import Entity, Schema
from graph_resolve.exceptions import InvalidSelectionError
from graph_resolve.utils.types import shelling_type


class Selection:
    """
    Ordered tree of requested fields.

    A field maps to None for a scalar, or to a nested Selection for a
    relationship.

    ```python
    Selection.of('name', books=Selection.of('title'))
    ```
    """
    def __init__(self, fields: Optional[Dict[str, Optional[Selection]]] = None):
        self.fields: Dict[str, Optional[Selection]] = dict(fields or {})

    @classmethod
    def of(cls, *names: str, **nested: Selection) -> Selection:
        fields: Dict[str, Optional[Selection]] = {}
        for name in names:
            if not isinstance(name, str):
                raise TypeError('field name must be a string')
            fields[name] = None
        for name, sub in nested.items():
            if not isinstance(sub, Selection):
                raise TypeError(f'nested selection of "{name}" must be a Selection')
            fields[name] = sub
        return cls(fields)

    @classmethod
    def scalars(cls, entity: Entity) -> Selection:
        return cls.of(*entity.scalar_fields)

    @classmethod
    def from_model(cls, kls: Type[BaseModel]) -> Selection:
        """
        derive a selection from a pydantic view model

        class BookView(BaseModel):
            title: str
            author: Optional[AuthorView] = None

        -> {title, author {...AuthorView}}
        """
        fields: Dict[str, Optional[Selection]] = {}
        for name, field_info in kls.model_fields.items():
            core = shelling_type(field_info.annotation)
            if isinstance(core, type) and issubclass(core, BaseModel):
                fields[name] = cls.from_model(core)
            else:
                fields[name] = None
        return cls(fields)

    def items(self) -> Iterator[Tuple[str, Optional[Selection]]]:
        return iter(self.fields.items())

    def __iter__(self):
        return iter(self.fields)

    def __len__(self):
        return len(self.fields)

    def __contains__(self, name: str):
        return name in self.fields

    def __eq__(self, other):
        if not isinstance(other, Selection):
            return NotImplemented
        return self.fields == other.fields

    def __repr__(self) -> str:
        return f'Selection({self.to_dict()!r})'

    def to_dict(self) -> Dict[str, Any]:
        return {k: (v.to_dict() if v is not None else None) for k, v in self.fields.items()}

    def validate_for(self, schema: Schema, entity: Entity, path: Optional[str] = None) -> None:
        """raise InvalidSelectionError on the first field the entity cannot serve"""
        path = path or entity.name

        if not self.fields:
            raise InvalidSelectionError(f'{path}: selection is empty')

        for name, sub in self.fields.items():
            field_path = f'{path}.{name}'
            rel = entity.get_relationship(name)

            if rel is None:
                if name not in entity.kls.model_fields:
                    raise InvalidSelectionError(f'{field_path}: field not found on {entity.name}')
                if sub is not None:
                    raise InvalidSelectionError(f'{field_path}: scalar field does not accept a sub selection')
                continue

            if sub is None:
                raise InvalidSelectionError(f'{field_path}: relationship requires a sub selection')
            sub.validate_for(schema, schema.get_entity(rel.target), field_path)


SelectionInput = Union[Selection, list, tuple, dict]


def parse_selection(data: SelectionInput) -> Selection:
    """
    build a Selection from plain python structures

    - ['name', {'books': ['title']}]
    - {'name': None, 'books': {'title': None}}
    """
    if isinstance(data, Selection):
        return data

    fields: Dict[str, Optional[Selection]] = {}

    def _put(name, value):
        if not isinstance(name, str):
            raise InvalidSelectionError(f'field name must be a string, got {name!r}')
        if name in fields:
            raise InvalidSelectionError(f'duplicate field name "{name}" in selection')
        fields[name] = None if value is None else parse_selection(value)

    if isinstance(data, dict):
        for name, value in data.items():
            _put(name, value)
    elif isinstance(data, (list, tuple)):
        for item in data:
            if isinstance(item, dict):
                for name, value in item.items():
                    _put(name, value)
            else:
                _put(item, None)
    else:
        raise InvalidSelectionError(f'cannot build selection from {type(data).__name__}')

    return Selection(fields)
