"""Error taxonomy for the verification pipeline."""

from typing import Optional

from .models.source import SearchError


class VerificationError(Exception):
    """Base class for all verification pipeline errors."""


class ConfigurationError(VerificationError):
    """A mandatory credential or setting is missing.

    Raised before the pipeline starts; always fatal.
    """


class ProviderError(VerificationError):
    """A search provider failed or timed out.

    Never escapes the aggregator: it is converted into a ``SearchError``
    record and reported alongside the sources that did arrive.
    """

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message

    def to_record(self) -> SearchError:
        """Convert the exception into a serializable error record."""
        return SearchError(provider=self.provider, message=self.message)


class ParseError(VerificationError):
    """External capability output did not contain a valid structured payload."""

    def __init__(self, raw_text: str, reason: Optional[str] = None):
        super().__init__(reason or "No structured payload found")
        self.raw_text = raw_text
        self.reason = reason or "No structured payload found"


class AnalysisError(VerificationError):
    """The claim-extraction capability was unreachable or errored."""
