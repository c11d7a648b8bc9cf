import os
import copy
import asyncio
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel

import graph_resolve.constant as const
import graph_resolve.utils.profile as profile_util
from graph_resolve.schema import Entity, Relationship
from graph_resolve.selection import Selection, SelectionInput, parse_selection
from graph_resolve.store import Store
from graph_resolve.exceptions import InvalidSelectionError
from graph_resolve.utils.dataloader import RelationshipLoader
from graph_resolve.utils.logger import get_logger

logger = get_logger(__name__)

ResultNode = Dict[str, Any]
LoaderCache = Dict[Tuple[str, str], RelationshipLoader]


def _normalize(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


class Resolver:
    def __init__(
            self,
            store: Optional[Store] = None,
            debug=False,
            ):
        self.debug = debug or os.getenv(const.DEBUG_ENV, "false").lower() == "true"

        # store bound by config_resolver / config_global_resolver
        store = store or getattr(self.__class__, const.STORE, None)
        if store is None:
            raise AttributeError('store is missing')

        self.store: Store = store
        self.schema = store.schema
        self.performance = profile_util.Profile()

    def _prepare(self, entity_name: str, selection: SelectionInput) -> Tuple[Entity, Selection]:
        entity = self.schema.get_entity(entity_name)
        selection = parse_selection(selection)
        selection.validate_for(self.schema, entity)

        if self.debug:
            logger.debug(f'{entity.name}: {selection.to_dict()}')
        return entity, selection

    def _get_loader(self, entity: Entity, rel: Relationship, loaders: LoaderCache) -> RelationshipLoader:
        cache_key = (entity.name, rel.name)
        loader = loaders.get(cache_key)
        if loader is None:
            loader = RelationshipLoader(
                relationship=rel,
                target_store=self.store[rel.target],
                target_field=self.schema.get_target_field(rel))
            loaders[cache_key] = loader
        return loader

    async def _resolve_relationship(
            self,
            entity: Entity,
            rel: Relationship,
            instance: BaseModel,
            selection: Selection,
            loaders: LoaderCache,
            path: str):
        fk = getattr(instance, rel.field)
        if fk is None:
            return [] if rel.load_many else None

        loader = self._get_loader(entity, rel, loaders)
        target = self.schema.get_entity(rel.target)

        if rel.load_many:
            items = await loader.load(fk)
            nodes = await asyncio.gather(*[
                self._resolve_node(target, item, selection, loaders, path) for item in items])
            return list(nodes)

        item = await loader.load(fk)
        if item is None:
            return None
        return await self._resolve_node(target, item, selection, loaders, path)

    async def _resolve_node(
            self,
            entity: Entity,
            instance: BaseModel,
            selection: Selection,
            loaders: LoaderCache,
            path: str) -> ResultNode:
        if not self.debug:
            return await self._build_node(entity, instance, selection, loaders, path)

        with self.performance.get_timer(path).measure():
            return await self._build_node(entity, instance, selection, loaders, path)

    async def _build_node(
            self,
            entity: Entity,
            instance: BaseModel,
            selection: Selection,
            loaders: LoaderCache,
            path: str) -> ResultNode:
        """
        build the result node of one instance

        scalar values are copied, relationship fields are traversed
        concurrently, the key order of the node follows the selection.
        """
        node: ResultNode = {}
        tasks = {}

        for name, sub in selection.items():
            rel = entity.get_relationship(name)
            if rel is None:
                node[name] = copy.deepcopy(getattr(instance, name))
            else:
                node[name] = None  # placeholder, keeps order
                tasks[name] = self._resolve_relationship(entity, rel, instance, sub, loaders, f'{path}.{name}')

        if tasks:
            values = await asyncio.gather(*tasks.values())
            for name, val in zip(tasks.keys(), values):
                node[name] = val

        return node

    def _report(self):
        if self.debug:
            self.performance.report()

    async def resolve_collection(self, entity_name: str, selection: SelectionInput) -> List[ResultNode]:
        """one result node per instance in the store, in store order"""
        entity, selection = self._prepare(entity_name, selection)
        instances = self.store[entity.name].snapshot()

        loaders: LoaderCache = {}
        try:
            nodes = await asyncio.gather(*[
                self._resolve_node(entity, instance, selection, loaders, entity.name) for instance in instances])
        finally:
            self._report()
        return list(nodes)

    async def resolve_by_key(self, entity_name: str, key: Any, selection: SelectionInput) -> Optional[ResultNode]:
        """return None if no instance has the key"""
        entity, selection = self._prepare(entity_name, selection)
        try:
            instance = self.store[entity.name].get(key)
            if instance is None:
                return None
            return await self._resolve_node(entity, instance, selection, {}, entity.name)
        finally:
            self._report()

    async def find_by(self, entity_name: str, field: str, value: Any, selection: SelectionInput) -> Optional[ResultNode]:
        """
        first instance whose `field` matches `value`, in store order

        strings are compared case-insensitively.
        """
        entity, selection = self._prepare(entity_name, selection)
        if field not in entity.kls.model_fields:
            raise InvalidSelectionError(f'{entity.name}.{field}: field not found on {entity.name}')

        expected = _normalize(value)
        try:
            for instance in self.store[entity.name].snapshot():
                if _normalize(getattr(instance, field)) == expected:
                    return await self._resolve_node(entity, instance, selection, {}, entity.name)
            return None
        finally:
            self._report()

    async def resolve_field(
            self,
            entity_name: str,
            instance: BaseModel,
            name: str,
            selection: Optional[SelectionInput] = None):
        """
        resolve one field of an instance

        - scalar: the stored value
        - one-to-many relationship: list of result nodes, [] if nothing matches
        - one-to-one relationship: result node or None
        """
        sub = parse_selection(selection) if selection is not None else None
        entity, field_selection = self._prepare(entity_name, Selection({name: sub}))

        try:
            node = await self._resolve_node(entity, instance, field_selection, {}, entity.name)
        finally:
            self._report()
        return node[name]

    def create_instance(self, entity_name: str, values: Dict[str, Any]) -> ResultNode:
        """
        append a new instance, key = max existing key + 1 (1 for an empty store)

        returns all scalar fields of the new instance.
        """
        entity = self.schema.get_entity(entity_name)
        instance = self.store.create(entity.name, values)
        return {name: copy.deepcopy(getattr(instance, name)) for name in Selection.scalars(entity)}
