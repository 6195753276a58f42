"""Exception types for linkwalk.

Every error can carry the context of how far a traversal got: the step that
was last reached plus its response and URI, and for status/parse failures the
rejected document.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from core.domain.models import Step


class LinkwalkError(Exception):
    """Base exception for linkwalk."""

    def __init__(
        self,
        message: str,
        *,
        step: Step | None = None,
        response: Any = None,
        uri: str | None = None,
        doc: Any = None,
    ) -> None:
        super().__init__(message)
        self.step = step
        if step is not None:
            response = response if response is not None else step.response
            uri = uri if uri is not None else step.uri
        self.response = response
        self.uri = uri
        self.doc = doc


class ConfigurationError(LinkwalkError, ValueError):
    """Raised for an unsupported media type or a misused traversal."""


class TraversalError(LinkwalkError):
    """Raised when a hop could not be resolved while walking the link chain.

    ``step`` is the last node successfully reached.
    """


class LinkNotFoundError(TraversalError):
    """Raised by a walker when a document has neither a link nor an embedded
    resource for the requested relation."""


class MaterializationError(LinkwalkError):
    """Raised when the terminal node could not be fetched."""


class HttpStatusError(LinkwalkError):
    """Raised for a non-2xx response. ``doc`` holds the parsed or raw body."""

    def __init__(self, message: str, *, status_code: int, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.status_code = status_code


class DocumentParseError(LinkwalkError):
    """Raised when a response body is not valid JSON. ``doc`` is the raw text."""


class AddressResolutionError(LinkwalkError):
    """Raised when an embedded terminal resource has no self link."""


class TransportError(LinkwalkError):
    """Raised when the transport fails; the original exception is ``__cause__``."""
