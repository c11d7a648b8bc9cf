import copy
from typing import Any, Dict, List, Optional, Tuple, Type
from pydantic import BaseModel, create_model

from graph_resolve.schema import Entity, Schema
from graph_resolve.selection import Selection, SelectionInput, parse_selection


def _extract_field_info(kls: Type[BaseModel], field_name: str) -> Tuple[Any, Any]:
    field = kls.model_fields[field_name]
    return (field.annotation, copy.deepcopy(field))


def _get_kls_config(kls: Type[BaseModel]) -> Any:
    return getattr(kls, 'model_config', None)


def _build(schema: Schema, entity: Entity, selection: Selection, name: str) -> Type[BaseModel]:
    field_definitions: Dict[str, Tuple[Any, Any]] = {}

    for field_name, sub in selection.items():
        rel = entity.get_relationship(field_name)
        if rel is None:
            field_definitions[field_name] = _extract_field_info(entity.kls, field_name)
            continue

        target = schema.get_entity(rel.target)
        sub_kls = _build(schema, target, sub, f'{name}_{field_name}')  # type: ignore
        if rel.load_many:
            field_definitions[field_name] = (List[sub_kls], [])  # type: ignore
        else:
            field_definitions[field_name] = (Optional[sub_kls], None)  # type: ignore

    create_model_kwargs: Dict[str, Any] = {}
    config = _get_kls_config(entity.kls)
    if config:
        create_model_kwargs['__config__'] = config

    return create_model(name, **field_definitions, **create_model_kwargs)


def create_selection_model(
        schema: Schema,
        entity_name: str,
        selection: SelectionInput,
        name: Optional[str] = None) -> Type[BaseModel]:
    """
    Create a pydantic model shaped exactly like a selection.

    Scalar fields keep the annotation (and FieldInfo) of the entity class,
    one-to-many relationships become List[Sub], one-to-one become Optional[Sub].

    Args:
        schema: schema the selection belongs to
        entity_name: root entity of the selection
        selection: Selection or its plain python form
        name: name of the generated class (default: "<Entity>Selection")

    Returns:
        A new BaseModel class containing only the selected fields
    """
    entity = schema.get_entity(entity_name)
    selection = parse_selection(selection)
    selection.validate_for(schema, entity)
    return _build(schema, entity, selection, name or f'{entity.name}Selection')
