import threading
from typing import Any, Dict, Iterable, List, Optional, Tuple
from pydantic import BaseModel, ValidationError

from graph_resolve.schema import Entity, Schema
from graph_resolve.exceptions import DuplicateKeyError, InstanceValidationError
from graph_resolve.utils.logger import get_logger

logger = get_logger(__name__)


class InstanceStore:
    """
    Ordered, append-only instances of one entity type.

    Insertion order is iteration order. A key index and the running max key
    are kept in step with every append. Appends and snapshots share one lock,
    so readers see either the state before or after an append.
    """
    def __init__(self, entity: Entity):
        self.entity = entity
        self._items: List[BaseModel] = []
        self._index: Dict[Any, BaseModel] = {}
        self._max_key: Optional[Any] = None
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._items)

    def _validate(self, values: Dict[str, Any]) -> BaseModel:
        unknown = [k for k in values if k not in self.entity.kls.model_fields]
        if unknown:
            raise InstanceValidationError(
                f'invalid values for {self.entity.name}: unknown field(s) {", ".join(unknown)}',
                errors=[{'loc': (k,), 'msg': 'unknown field', 'type': 'extra_forbidden'} for k in unknown])
        try:
            return self.entity.kls.model_validate(values)
        except ValidationError as e:
            raise InstanceValidationError(
                f'invalid values for {self.entity.name}: {e.error_count()} error(s)',
                errors=e.errors()) from e

    def _append(self, instance: BaseModel):
        key = getattr(instance, self.entity.key)
        self._check_new_key(key)

        self._items.append(instance)
        self._index[key] = instance
        if self._max_key is None or key > self._max_key:
            self._max_key = key

    def _check_new_key(self, key: Any):
        if key in self._index:
            raise DuplicateKeyError(f'{self.entity.name} with {self.entity.key}={key!r} already exists')

    def _to_instance(self, values) -> BaseModel:
        return values if isinstance(values, self.entity.kls) else self._validate(dict(values))

    def add(self, values: Dict[str, Any]) -> BaseModel:
        """append an instance whose key is provided by the caller"""
        return self.add_many([values])[0]

    def add_many(self, rows: Iterable[Dict[str, Any]]) -> List[BaseModel]:
        """
        append a batch of instances with caller provided keys

        every row is validated and every key checked before the first append,
        a failing batch leaves the store untouched.
        """
        instances = [self._to_instance(row) for row in rows]

        with self._lock:
            batch_keys = set()
            for instance in instances:
                key = getattr(instance, self.entity.key)
                self._check_new_key(key)
                if key in batch_keys:
                    raise DuplicateKeyError(f'{self.entity.name} with {self.entity.key}={key!r} is repeated in the batch')
                batch_keys.add(key)

            for instance in instances:
                self._append(instance)
        return instances

    def create(self, values: Dict[str, Any]) -> BaseModel:
        """append an instance with key = max existing key + 1, or 1 when empty"""
        key_name = self.entity.key
        if key_name in values:
            raise InstanceValidationError(
                f'{key_name} of {self.entity.name} is assigned by the store',
                errors=[{'loc': (key_name,), 'msg': 'field is assigned by the store', 'type': 'key_provided'}])

        with self._lock:
            new_key = 1 if self._max_key is None else self._max_key + 1
            instance = self._validate({**values, key_name: new_key})
            self._append(instance)
        return instance

    def get(self, key: Any) -> Optional[BaseModel]:
        """return None if absent, an unhashable key can match nothing"""
        try:
            hash(key)
        except TypeError:
            return None
        with self._lock:
            return self._index.get(key)

    def snapshot(self) -> Tuple[BaseModel, ...]:
        with self._lock:
            return tuple(self._items)


class Store:
    """Owns one InstanceStore per entity type of a schema."""
    def __init__(self, schema: Schema, debug: bool = False):
        self.schema = schema
        self.debug = debug
        self._stores: Dict[str, InstanceStore] = {
            entity.name: InstanceStore(entity) for entity in schema.entities
        }

    def __getitem__(self, entity_name: str) -> InstanceStore:
        entity = self.schema.get_entity(entity_name)  # raise UnknownEntityError
        return self._stores[entity.name]

    def seed(self, entity_name: str, rows: Iterable[Dict[str, Any]]) -> int:
        count = len(self[entity_name].add_many(rows))
        if self.debug:
            logger.debug(f'seeded {count} {entity_name} instance(s)')
        return count

    def create(self, entity_name: str, values: Dict[str, Any]) -> BaseModel:
        instance = self[entity_name].create(values)
        if self.debug:
            logger.debug(f'created {entity_name}: {instance!r}')
        return instance
