class GraphResolveError(Exception):
    pass

class InvalidSelectionError(GraphResolveError):
    pass

class UnknownEntityError(GraphResolveError):
    pass

class DuplicateKeyError(GraphResolveError):
    pass

class InstanceValidationError(GraphResolveError):
    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = errors or []
