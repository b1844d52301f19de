"""Exceptions raised by the domain knowledge engine."""


class DomainKnowledgeError(Exception):
    """Base error for the engine."""


class ObservationStoreError(DomainKnowledgeError):
    """Persisting or reading observations failed."""
