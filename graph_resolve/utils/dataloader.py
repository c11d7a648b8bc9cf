from collections import defaultdict
from typing import Callable, DefaultDict, Dict, Iterator, List, Optional, Sequence, TypeVar
from aiodataloader import DataLoader

from graph_resolve.schema import Relationship
from graph_resolve.store import InstanceStore

T = TypeVar("T")
V = TypeVar("V")

def build_list(items: Sequence[T], keys: List[V], get_pk: Callable[[T], V]) -> Iterator[List[T]]:
    """
    helper function to build return list data required by aiodataloader
    """
    dct: DefaultDict[V, List[T]] = defaultdict(list)
    for item in items:
        _key = get_pk(item)
        dct[_key].append(item)
    results = (dct.get(k, []) for k in keys)
    return results


def build_object(items: Sequence[T], keys: List[V], get_pk: Callable[[T], V]) -> Iterator[Optional[T]]:
    """
    helper function to build return object data required by aiodataloader

    the first item of each key wins, so the order of items is the tie-break
    """
    dct: Dict[V, T] = {}
    for item in items:
        _key = get_pk(item)
        if _key not in dct:
            dct[_key] = item
    results = (dct.get(k, None) for k in keys)
    return results


class RelationshipLoader(DataLoader):
    """
    batch the traversal of one relationship over the target InstanceStore

    keys are values of relationship.field taken from owning instances
    """
    def __init__(self, relationship: Relationship, target_store: InstanceStore, target_field: str):
        super().__init__()
        self.relationship = relationship
        self.target_store = target_store
        self.target_field = target_field

    async def batch_load_fn(self, keys):
        if self.target_field == self.target_store.entity.key and not self.relationship.load_many:
            return [self.target_store.get(k) for k in keys]

        items = self.target_store.snapshot()
        get_pk = lambda x: getattr(x, self.target_field)  # noqa: E731

        if self.relationship.load_many:
            return list(build_list(items, keys, get_pk))
        return list(build_object(items, keys, get_pk))
