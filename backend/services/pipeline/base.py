"""Abstract base class for completion backends, plus their error taxonomy."""

from abc import ABC, abstractmethod
import logging

logger = logging.getLogger(__name__)

# Statuses a provider answers with when it refuses the JSON-mode flag
PARAMETER_REJECTION_STATUSES = frozenset({400, 404, 422})


class UpstreamError(Exception):
    """Network failure, timeout, or non-success status from the provider."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ParameterRejectedError(UpstreamError):
    """The provider refused schema-constrained decoding for this model."""


def classify_status(message: str, status_code: int | None, strict: bool) -> UpstreamError:
    """Build the right error for a failed call.

    A 400/404/422 while JSON mode was requested is treated as the
    provider rejecting the flag, so the same model is retried relaxed.
    """
    if strict and status_code in PARAMETER_REJECTION_STATUSES:
        return ParameterRejectedError(message, status_code)
    return UpstreamError(message, status_code)


class CompletionClient(ABC):
    """Base class for LLM completion backends.

    Subclasses must implement:
        - provider_name: identifier used in client_registry
        - connect(): build the SDK client
        - complete(...): one request, returning the first choice's text
    """

    provider_name: str = ""
    _connected: bool = False

    @abstractmethod
    def connect(self) -> None:
        """Create the underlying SDK client. Called once by client_registry."""

    @abstractmethod
    async def complete(
        self,
        model: str,
        system: str,
        user: str,
        max_tokens: int,
        strict: bool,
    ) -> str:
        """Send one prompt with temperature 0.

        Returns the text of the first choice, or "" when the provider
        sent no content. Raises UpstreamError / ParameterRejectedError.
        """

    @property
    def is_connected(self) -> bool:
        return self._connected

    def ensure_connected(self) -> None:
        """Connect if not already connected."""
        if not self._connected:
            logger.info("Connecting completion client: %s", self.provider_name)
            self.connect()
            self._connected = True
