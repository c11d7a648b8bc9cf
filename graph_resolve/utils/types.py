from types import UnionType
from typing import Union, List, get_origin, get_args
from pydantic import BaseModel

from graph_resolve.exceptions import InvalidSelectionError


def _is_union(annotation):
    return get_origin(annotation) in (Union, UnionType)


def _is_list(annotation):
    return get_origin(annotation) in (list, List)


def shelling_type(tp):
    """
    strip Optional / List shells, keep the core type

    Optional[List[Book]] -> Book

    a union of scalars is kept as is, a union involving models has no
    single shape and is rejected, eg: Optional[Union[A, B]]
    """
    while _is_union(tp) or _is_list(tp):
        if _is_union(tp):
            members = [a for a in get_args(tp) if a is not type(None)]
            if len(members) > 1:
                cores = [shelling_type(m) for m in members]
                if any(isinstance(c, type) and issubclass(c, BaseModel) for c in cores):
                    raise InvalidSelectionError(f'cannot derive a single shape from {tp!r}')
                return tp
            tp = members[0]
        else:
            tp = get_args(tp)[0]
    return tp
