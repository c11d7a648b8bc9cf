DEFAULT_KEY = 'id'

STORE = '__graph_resolve_store__'

DEBUG_ENV = 'GRAPH_RESOLVE_DEBUG'
