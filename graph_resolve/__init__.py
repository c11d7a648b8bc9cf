from .schema import Entity, Relationship, Schema
from .store import InstanceStore, Store
from .selection import Selection, parse_selection
from .exceptions import (
    GraphResolveError,
    InvalidSelectionError,
    UnknownEntityError,
    DuplicateKeyError,
    InstanceValidationError)
from .resolver import Resolver
from .utils.dataloader import build_list, build_object
from .utils.subset import create_selection_model
from .utils.resolver_configurator import config_resolver, config_global_resolver


__all__ = [
    'Resolver',
    'Selection',
    'parse_selection',

    'Entity',
    'Relationship',
    'Schema',
    'InstanceStore',
    'Store',

    'GraphResolveError',
    'InvalidSelectionError',
    'UnknownEntityError',
    'DuplicateKeyError',
    'InstanceValidationError',

    'build_list',
    'build_object',
    'create_selection_model',

    'config_resolver',
    'config_global_resolver',
]
