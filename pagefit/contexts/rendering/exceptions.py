"""Custom exceptions for the rendering context with entry references."""

from typing import Optional

from pagefit.contexts.rendering.models import UrlEntry


class RenderError(Exception):
    """
    Base exception for rendering failures.

    Attributes:
        message: Error description
        entry: The entry being rendered when the error occurred (None for lifecycle errors)
        index: 1-based position of the entry in its batch
    """

    def __init__(
        self,
        message: str,
        entry: Optional[UrlEntry] = None,
        index: Optional[int] = None,
    ):
        self.message = message
        self.entry = entry
        self.index = index

        parts = [message]
        if entry is not None:
            position = f"entry {index}" if index is not None else "entry"
            parts.append(f"({position}: {entry.url} -> {entry.output})")

        super().__init__(" ".join(parts))


class UninitializedContext(RenderError):
    """Raised when rendering is attempted before init()."""

    def __init__(self, message: str = "Renderer context has not been initialized"):
        super().__init__(message)


class ContextDisposed(UninitializedContext):
    """Raised when a disposed context is initialized or used for rendering."""

    def __init__(self, message: str = "Renderer context has been disposed"):
        super().__init__(message)


class AlreadyInitialized(RenderError):
    """Raised when init() is called while a browser session is live."""

    def __init__(self, message: str = "Renderer context already holds a live browser session"):
        super().__init__(message)


class NavigationError(RenderError):
    """
    Raised when a page fails to load.

    Attributes:
        original_error: The underlying browser error
    """

    def __init__(
        self,
        message: str,
        entry: Optional[UrlEntry] = None,
        index: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.original_error = original_error
        if original_error is not None:
            message = f"{message}: {original_error}"
        super().__init__(message, entry=entry, index=index)


class NavigationTimeout(NavigationError):
    """
    Raised when navigation or the network-idle wait exceeds its deadline.

    Attributes:
        stage: "navigation" or "idle"
        timeout_ms: The deadline that expired
    """

    def __init__(
        self,
        stage: str,
        timeout_ms: int,
        entry: Optional[UrlEntry] = None,
        index: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.stage = stage
        self.timeout_ms = timeout_ms
        super().__init__(
            f"Timed out after {timeout_ms}ms waiting for {stage}",
            entry=entry,
            index=index,
        )
        self.original_error = original_error


class TargetNotFound(RenderError):
    """
    Raised when the target selector matches no element on a page,
    or the browser fails to query for it.

    Attributes:
        selector: The selector that matched nothing
        original_error: The underlying browser error (None if the query ran and matched nothing)
    """

    def __init__(
        self,
        selector: str,
        entry: Optional[UrlEntry] = None,
        index: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.selector = selector
        self.original_error = original_error
        if original_error is None:
            message = f'Missing "{selector}" from DOM'
        else:
            message = f'Failed to query "{selector}": {original_error}'
        super().__init__(message, entry=entry, index=index)


class BoundingBoxUnavailable(RenderError):
    """
    Raised when the target element has no measurable geometry.

    Attributes:
        selector: The selector of the unmeasurable element
        box: The box reported by the browser (None if absent)
        original_error: The underlying browser error, if measuring raised
    """

    def __init__(
        self,
        selector: str,
        entry: Optional[UrlEntry] = None,
        index: Optional[int] = None,
        box: Optional[dict] = None,
        original_error: Optional[Exception] = None,
    ):
        self.selector = selector
        self.box = box
        self.original_error = original_error
        if original_error is not None:
            reason = str(original_error) or type(original_error).__name__
        elif box is None:
            reason = "no bounding box"
        else:
            reason = f"empty bounding box {box}"
        super().__init__(
            f'Failed to resolve bounding-box size of "{selector}" ({reason})',
            entry=entry,
            index=index,
        )


class ExportFailure(RenderError):
    """
    Raised when the PDF export is rejected or times out.

    Attributes:
        path: Destination path of the failed export
        original_error: The underlying export error
    """

    def __init__(
        self,
        path,
        original_error: Exception,
        entry: Optional[UrlEntry] = None,
        index: Optional[int] = None,
    ):
        self.path = path
        self.original_error = original_error
        cause = str(original_error) or type(original_error).__name__
        super().__init__(f"PDF export to {path} failed: {cause}", entry=entry, index=index)


class SessionCloseError(RenderError):
    """
    Raised when closing the browser session fails during dispose().

    Attributes:
        original_error: The underlying close error
    """

    def __init__(self, original_error: Exception):
        self.original_error = original_error
        super().__init__(f"Failed to close browser session: {original_error}")
