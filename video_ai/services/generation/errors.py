from __future__ import annotations


class GenerationError(Exception):
    """Content could not be generated for a request."""


class InsufficientContentError(GenerationError):
    pass


class MalformedResponseError(GenerationError):
    pass


class SchemaValidationError(GenerationError):
    pass
