"""The host rendering contract components render through.

A `ViewContext` is the per-request rendering environment: it captures
blocks into markup, renders components and host templates, holds named
content buffers (`ViewFlow`), selects template variants (`LookupContext`)
and proxies helper functions and CSRF helpers from the controller.

Web frameworks build one ViewContext per request:

    from tessera import ViewContext

    view = ViewContext(
        controller,
        lookup_context=LookupContext(variants=["phone"]),
        environment=jinja_env,          # host templates / partials
        helpers={"url_for": url_for},
    )
    html = view.render(CardComponent(title="Hi"), "Body text")

Blocks:
A block is any callable returning content. It receives the positional
arguments passed to `capture()` only when its signature accepts them, so
``lambda: "text"`` and ``lambda card: card.slot("header", block=...)``
both work. Jinja2 ``caller`` macros from ``{% call %}`` blocks are
supported the same way.

Current component:
The component being rendered is tracked with a ContextVar, so nested and
concurrent renders (threads, asyncio tasks) each see their own.

"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import Any

import jinja2
from jinja2.runtime import Macro
from markupsafe import Markup, escape

Block = Callable[..., Any]

_current_component: ContextVar[Any | None] = ContextVar("current_component", default=None)


def get_current_component() -> Any | None:
    """Return the component currently rendering, or None outside a render."""
    return _current_component.get()


def set_current_component(component: Any | None) -> Token[Any | None]:
    """Set the current component and return the reset token.

    Low-level counterpart to `current_component()` for callers that need
    to restore the previous component manually.
    """
    return _current_component.set(component)


def reset_current_component(token: Token[Any | None]) -> None:
    """Restore the component that was current before `set_current_component()`."""
    _current_component.reset(token)


@contextmanager
def current_component(component: Any) -> Iterator[Any]:
    """Make ``component`` current for the duration of the with block."""
    token = _current_component.set(component)
    try:
        yield component
    finally:
        _current_component.reset(token)


@dataclass
class LookupContext:
    """Template lookup settings for a request.

    Attributes:
        variants: Requested template variants, most preferred first
            (e.g. ``["phone"]``). Components render the first one.
        formats: Accepted formats, most preferred first.
    """

    variants: list[str] = field(default_factory=list)
    formats: list[str] = field(default_factory=lambda: ["html"])


class ViewFlow:
    """Named content buffers shared by everything rendered in a request.

    Backs ``content_for``: a component can append markup under a name
    (e.g. ``"head"``) that the surrounding layout outputs later.
    """

    __slots__ = ("_content",)

    def __init__(self) -> None:
        self._content: dict[str, Markup] = {}

    def get(self, key: str) -> Markup:
        return self._content.get(key, Markup(""))

    def set(self, key: str, value: Any) -> None:
        self._content[key] = escape(value)

    def append(self, key: str, value: Any) -> None:
        self._content[key] = self.get(key) + escape(value)

    def __contains__(self, key: object) -> bool:
        return key in self._content

    def keys(self) -> list[str]:
        return list(self._content)


def call_block(block: Block, args: tuple[Any, ...]) -> Any:
    """Call ``block`` with as many of ``args`` as it accepts.

    Jinja2 macros (the ``caller`` of a ``{% call %}`` block) expose their
    declared arguments instead of a Python signature.
    """
    if not args:
        return block()

    arguments = getattr(block, "arguments", None)
    if isinstance(block, Macro) and arguments is not None:
        if block.catch_varargs:
            return block(*args)
        return block(*args[: len(arguments)])

    try:
        signature = inspect.signature(block)
    except (TypeError, ValueError):
        return block(*args)

    params = list(signature.parameters.values())
    if any(p.kind is p.VAR_POSITIONAL for p in params):
        return block(*args)
    positional = [p for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)]
    return block(*args[: len(positional)])


class ViewContext:
    """Per-request rendering environment.

    Attributes:
        controller: Request handler object; provides ``request``, ``config``
            and optionally ``form_authenticity_token()`` /
            ``protect_against_forgery()``
        lookup_context: Variant and format selection
        environment: Jinja2 environment for host templates and partials
        view_flow: Named content buffers (``content_for``)

    Unknown attributes resolve to registered helper functions, so
    ``view.url_for(...)`` calls the ``url_for`` helper.
    """

    def __init__(
        self,
        controller: Any = None,
        *,
        lookup_context: LookupContext | None = None,
        environment: jinja2.Environment | None = None,
        helpers: dict[str, Callable[..., Any]] | None = None,
        view_flow: ViewFlow | None = None,
    ):
        self.controller = controller
        self.lookup_context = lookup_context if lookup_context is not None else LookupContext()
        self.environment = environment
        self.view_flow = view_flow if view_flow is not None else ViewFlow()
        self._helpers: dict[str, Callable[..., Any]] = dict(helpers or {})

    def __getattr__(self, name: str) -> Any:
        helpers = self.__dict__.get("_helpers", {})
        if name in helpers:
            return helpers[name]
        raise AttributeError(f"{type(self).__name__!r} has no attribute or helper {name!r}")

    def __repr__(self) -> str:
        return (
            f"<ViewContext controller={type(self.controller).__name__} "
            f"variants={self.lookup_context.variants!r}>"
        )

    @property
    def view_renderer(self) -> ViewContext:
        return self

    @property
    def request(self) -> Any:
        return getattr(self.controller, "request", None)

    @property
    def config(self) -> Any:
        """Controller configuration (an empty dict when the controller has none)."""
        return getattr(self.controller, "config", None) or {}

    def add_helper(self, name: str, func: Callable[..., Any]) -> None:
        """Register a helper function reachable as ``view.<name>``."""
        self._helpers[name] = func

    def helper_functions(self) -> dict[str, Callable[..., Any]]:
        """Copy of the registered helpers (name -> function)."""
        return dict(self._helpers)

    def capture(self, block: Block | None, *args: Any) -> Markup:
        """Run ``block`` and return its result as markup.

        - Markup is returned unchanged
        - Components and collections are rendered
        - Strings are HTML-escaped
        - Anything else (None, tuples, numbers, ...) gives empty markup, so a
          block can be written for its side effects alone
        """
        if block is None:
            return Markup("")
        return self.to_markup(call_block(block, args))

    def to_markup(self, value: Any) -> Markup:
        if hasattr(value, "render_in"):
            return self.render(value)
        if isinstance(value, str) or hasattr(value, "__html__"):
            return escape(value)
        return Markup("")

    def render(
        self,
        renderable: Any,
        block: Block | str | None = None,
        *,
        caller: Block | None = None,
        **locals: Any,
    ) -> Markup:
        """Render a component, collection or host template.

        Args:
            renderable: Object with ``render_in(view_context, block)``, or a
                template name resolved through `environment`
            block: Content for the component: a callable, or plain
                text/markup used as-is
            caller: Jinja2 ``{% call %}`` body, used when ``block`` is None
            **locals: Template variables when rendering a template name
        """
        if block is None:
            block = caller
        if hasattr(renderable, "render_in"):
            if block is not None and not callable(block):
                content = block
                block = lambda: content  # noqa: E731
            return escape(renderable.render_in(self, block))
        if isinstance(renderable, str):
            return self.render_template(renderable, **locals)
        raise TypeError(
            f"Cannot render {renderable!r}: expected a component, a collection or a template name"
        )

    def render_template(self, name: str, **locals: Any) -> Markup:
        """Render a host template with the view helpers in scope."""
        if self.environment is None:
            raise jinja2.TemplateNotFound(
                name, message=f"Cannot render template {name!r}: no template environment configured"
            )
        template = self.environment.get_template(name)
        context: dict[str, Any] = dict(self._helpers)
        context.update(view=self, render=self.render, content_for=self.content_for)
        context.update(locals)
        return Markup(template.render(context))

    def content_for(
        self,
        name: str,
        content: Any = None,
        *,
        block: Block | None = None,
    ) -> Markup | None:
        """Append to (with content or block) or read (without) a named buffer."""
        if block is not None:
            content = self.capture(block)
        if content is not None:
            self.view_flow.append(name, content)
            return None
        return self.view_flow.get(name)

    def has_content_for(self, name: str) -> bool:
        return name in self.view_flow

    def form_authenticity_token(self) -> str | None:
        """CSRF token from the controller, or None without CSRF protection."""
        token = getattr(self.controller, "form_authenticity_token", None)
        return token() if callable(token) else None

    def protect_against_forgery(self) -> bool:
        protect = getattr(self.controller, "protect_against_forgery", None)
        return bool(protect()) if callable(protect) else False
