"""
Error taxonomy for the friction engine.

Store operations turn these into ``{"success": False, "error": ...}``
results; only the codec and the raw key-value load raise them outward.
"""


class FrictionError(Exception):
    """Base class for engine errors."""


class ValidationError(FrictionError):
    """Input rejected before any mutation (empty text, malformed backup)."""


class NotFoundError(FrictionError):
    """An operation referenced a project or task id that no longer exists."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind.capitalize()} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


class ParseError(FrictionError):
    """Persisted JSON for a collection could not be decoded."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Could not parse stored '{key}': {reason}")
        self.key = key
        self.reason = reason
