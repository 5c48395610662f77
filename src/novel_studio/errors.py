"""
Custom exceptions

Errors with explicit meaning passed between the store, the persistence layer
and the front ends.
"""


class NovelStudioError(Exception):
    """Base class for every error raised by novel_studio"""
    pass


class ValidationError(NovelStudioError):
    """A required field (title, name) was blank at the write boundary"""
    pass


class NotFoundError(NovelStudioError):
    """An update referenced an id that is not in the collection"""

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id


class DataImportError(NovelStudioError):
    """An import payload could not be parsed as a document object"""
    pass


class PersistenceError(NovelStudioError):
    """The durable store could not be read; recovered by loading defaults"""
    pass


class ContentSourceError(NovelStudioError):
    """The writing assistant's content source failed to produce text"""
    pass
