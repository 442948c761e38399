"""
Exception hierarchy for homonym-collector.
"""


class HomonymsError(Exception):
    """Base exception for all homonym-collector errors."""


class ValidationError(HomonymsError):
    """Caller supplied malformed input (empty name, too few words, ...)."""


class EntityNotFoundError(HomonymsError):
    """Collection or homonym group doesn't exist."""


class StoreError(HomonymsError):
    """Persistence backend failed."""


class SourceError(HomonymsError):
    """A single dictionary source failed to answer for a word."""

    def __init__(self, word: str, source: str, message: str = ""):
        self.word = word
        self.source = source
        super().__init__(message or f"{source}: lookup failed for '{word}'")


class NotFound(SourceError):
    """Source answered but had no entry (or only "did you mean" suggestions)."""


class Timeout(SourceError):
    """Source did not answer within the lookup timeout."""


class TransportError(SourceError):
    """Network or HTTP-level failure."""

    def __init__(self, word: str, source: str, message: str = "", status_code: int | None = None):
        self.status_code = status_code
        super().__init__(word, source, message)

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429


class LookupFailure(HomonymsError):
    """Definition lookup exhausted every source."""

    def __init__(self, word: str, reason: str, errors: list[SourceError] | None = None):
        self.word = word
        self.reason = reason
        self.errors = errors or []
        super().__init__(f'Word "{word}" not found: {reason}')

    @property
    def rate_limited(self) -> bool:
        return any(isinstance(e, TransportError) and e.rate_limited for e in self.errors)
