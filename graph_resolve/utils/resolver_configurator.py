from typing import Optional
import graph_resolve.constant as const
import graph_resolve.resolver as resolver
from graph_resolve.store import Store

def config_resolver(name: Optional[str]=None,
                    store: Optional[Store]=None):
    """return a Resolver class bound to `store`, eg: BookResolver().resolve_collection(...)"""
    new_resolver = type(
        name or resolver.Resolver.__name__,
        resolver.Resolver.__bases__,
        dict(resolver.Resolver.__dict__)
    )
    setattr(new_resolver, const.STORE, store)
    return new_resolver


def config_global_resolver(store: Optional[Store]=None):
    setattr(resolver.Resolver, const.STORE, store)
