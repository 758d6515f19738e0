"""Exceptions for Tessera components.

Exception Hierarchy:
ComponentError (base)
├── ViewContextCalledBeforeRenderError  # controller/helpers used outside render
├── TemplateError                       # component templates failed to compile
├── UnknownContentAreaError             # with_area() for an undeclared area
├── ReservedNameError                   # "content" used as area or slot name
├── UnknownSlotError                    # slot() for an undeclared slot
├── DuplicateSlotError                  # with_slot() declared a name twice
├── InvalidSlotClassError               # slot class is not a Slot subclass
├── CollectionParameterError            # initializer rejects collection parameter
├── InvalidCollectionError              # with_collection() given a non-sequence
└── PreviewError
    ├── PreviewNotFoundError            # unknown preview or example
    └── PreviewsDisabledError           # show_previews is off

All of these are user-code-facing validation errors. They are raised
synchronously to the caller and never retried or recovered internally.

Argument-style errors also inherit from ``ValueError`` or ``TypeError`` so
callers that only know the builtin hierarchy can still catch them.

Example:
    ```
    T-RND-002: Unknown content_area 'footer' - expected one of '('header', 'body')'
      Component: CardComponent
      Hint: Declare it with CardComponent.with_content_areas('footer')
      Docs: https://tessera.readthedocs.io/en/latest/errors.html#t-rnd-002
    ```

"""

from __future__ import annotations

from enum import Enum

from tessera import terminal

_DOCS_BASE = "https://tessera.readthedocs.io/en/latest/errors.html"


class ErrorCode(Enum):
    """Searchable error codes for component errors.

    Format: T-{CATEGORY}-{NUMBER}
    Categories: CMP (compile), RND (render), SLT (slots),
    COL (collections), PRV (previews)
    """

    # Compile errors (T-CMP-xxx)
    COMPILE_ERROR = "T-CMP-001"
    TEMPLATE_SYNTAX = "T-CMP-002"

    # Render errors (T-RND-xxx)
    RENDER_CONTEXT_MISSING = "T-RND-001"
    UNKNOWN_CONTENT_AREA = "T-RND-002"
    RESERVED_NAME = "T-RND-003"

    # Slot errors (T-SLT-xxx)
    UNKNOWN_SLOT = "T-SLT-001"
    DUPLICATE_SLOT = "T-SLT-002"
    INVALID_SLOT_CLASS = "T-SLT-003"

    # Collection errors (T-COL-xxx)
    COLLECTION_PARAMETER = "T-COL-001"
    INVALID_COLLECTION = "T-COL-002"

    # Preview errors (T-PRV-xxx)
    PREVIEW_NOT_FOUND = "T-PRV-001"
    PREVIEWS_DISABLED = "T-PRV-002"

    @property
    def docs_url(self) -> str:
        """Documentation URL for this error code."""
        return f"{_DOCS_BASE}#{self.value.lower()}"

    @property
    def category(self) -> str:
        """Error category (e.g. 'compile', 'render', 'slot')."""
        prefix = self.value.split("-")[1]
        return {
            "CMP": "compile",
            "RND": "render",
            "SLT": "slot",
            "COL": "collection",
            "PRV": "preview",
        }.get(prefix, "unknown")


class ComponentError(Exception):
    """Base exception for all component errors.

    Attributes:
        message: Error description (also ``str(exc)``)
        component: Name of the component class involved, if known
        suggestion: Optional actionable hint shown by ``format_compact()``
        code: ErrorCode for searchable identification
    """

    code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        *,
        component: str | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.component = component
        self.suggestion = suggestion
        super().__init__(message)

    def format_compact(self) -> str:
        """Format the error as a colored, human-readable diagnostic.

        Produces a summary suitable for terminal display without Python
        traceback noise.
        """
        code = self.code.value if self.code else None
        parts = [terminal.format_error_header(code, self.message)]
        if self.component:
            parts.append(f"  Component: {terminal.location(self.component)}")
        if self.suggestion:
            parts.append(f"  Hint: {terminal.hint(self.suggestion)}")
        if self.code:
            parts.append(f"  Docs: {terminal.docs_url(self.code.docs_url)}")
        return "\n".join(parts)


class ViewContextCalledBeforeRenderError(ComponentError):
    """Render-time state (controller, helpers, request) used before render.

    Example:
        >>> CardComponent(title="x").helpers
        ViewContextCalledBeforeRenderError: `helpers` can only be called at render time.
    """

    code = ErrorCode.RENDER_CONTEXT_MISSING


class TemplateError(ComponentError):
    """Component templates could not be compiled.

    Collects every problem found for a component class so they can be
    fixed in one pass.

    Attributes:
        errors: Individual error messages, in discovery order
    """

    code = ErrorCode.COMPILE_ERROR

    def __init__(self, errors: list[str] | str, *, component: str | None = None):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("\n".join(self.errors), component=component)


class TemplateSyntaxError(TemplateError):
    """A component template failed to parse.

    Attributes:
        filename: Template file path (or ``<inline>``)
        lineno: Line of the syntax error, when known
    """

    code = ErrorCode.TEMPLATE_SYNTAX

    def __init__(
        self,
        message: str,
        *,
        filename: str | None = None,
        lineno: int | None = None,
        component: str | None = None,
    ):
        self.filename = filename
        self.lineno = lineno
        location = filename or "<inline>"
        if lineno:
            location += f":{lineno}"
        super().__init__([f"Syntax error in {location}: {message}"], component=component)


class UnknownContentAreaError(ComponentError, ValueError):
    """``with_area()`` called for an area the component did not declare."""

    code = ErrorCode.UNKNOWN_CONTENT_AREA


class ReservedNameError(ComponentError, ValueError):
    """``content`` used as a content-area or slot name."""

    code = ErrorCode.RESERVED_NAME


class UnknownSlotError(ComponentError, ValueError):
    """``slot()`` called for a slot the component did not declare."""

    code = ErrorCode.UNKNOWN_SLOT


class DuplicateSlotError(ComponentError, ValueError):
    """``with_slot()`` declared the same slot name twice."""

    code = ErrorCode.DUPLICATE_SLOT


class InvalidSlotClassError(ComponentError, TypeError):
    """A slot's class does not inherit from `tessera.Slot`."""

    code = ErrorCode.INVALID_SLOT_CLASS


class CollectionParameterError(ComponentError, ValueError):
    """The component initializer does not accept the collection parameter."""

    code = ErrorCode.COLLECTION_PARAMETER


class InvalidCollectionError(ComponentError, TypeError):
    """``with_collection()`` was given something that is not a sequence."""

    code = ErrorCode.INVALID_COLLECTION


class PreviewError(ComponentError):
    """Base class for preview harness errors."""


class PreviewNotFoundError(PreviewError, LookupError):
    """No preview (or no example on a preview) matches the requested name."""

    code = ErrorCode.PREVIEW_NOT_FOUND


class PreviewsDisabledError(PreviewError):
    """Previews were requested while ``show_previews`` is disabled."""

    code = ErrorCode.PREVIEWS_DISABLED
