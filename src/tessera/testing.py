"""Test helpers for rendering components in isolation.

    from tessera.testing import render_inline, with_variant

    def test_renders_title() -> None:
        html = render_inline(CardComponent(title="Hi"), "Body")
        assert '<h2>Hi</h2>' in html

    def test_phone_variant() -> None:
        with with_variant("phone"):
            assert "card--phone" in render_inline(CardComponent(title="Hi"))

The view context is built around the configured ``test_controller``
(default `TestController`), so components calling ``controller``,
``request`` or ``form_authenticity_token()`` work under test.
"""

from __future__ import annotations

import importlib
import secrets
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from markupsafe import Markup

from tessera.config import get_config
from tessera.previewable import render_preview as _render_preview
from tessera.view_context import LookupContext, ViewContext

_variant: ContextVar[str | None] = ContextVar("test_variant", default=None)
_rendered: ContextVar[Markup | None] = ContextVar("rendered_component", default=None)


@dataclass
class TestRequest:
    """Minimal request object for component tests."""

    __test__ = False

    path: str = "/"
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)


class TestController:
    """Controller used by `build_view_context` unless configured otherwise.

    Provides a request, a per-controller CSRF token and an empty config.
    """

    __test__ = False

    def __init__(self, request: TestRequest | None = None, *, protect_against_forgery: bool = True):
        self.request = request if request is not None else TestRequest()
        self.config: dict[str, Any] = {}
        self._protect = protect_against_forgery
        self._token = secrets.token_urlsafe(32)

    def form_authenticity_token(self) -> str:
        return self._token

    def protect_against_forgery(self) -> bool:
        return self._protect


def _resolve(dotted_path: str) -> Any:
    module_name, _, attr = dotted_path.rpartition(".")
    if not module_name:
        raise ImportError(f"test_controller must be a dotted path, got {dotted_path!r}")
    return getattr(importlib.import_module(module_name), attr)


def build_controller() -> Any:
    """Instantiate the configured ``test_controller``."""
    return _resolve(get_config().test_controller)()


def build_view_context(**kwargs: Any) -> ViewContext:
    """Build a view context for tests, honoring `with_variant`.

    Keyword arguments are passed to `ViewContext` (``controller`` defaults
    to the configured test controller).
    """
    controller = kwargs.pop("controller", None)
    if controller is None:
        controller = build_controller()
    variant = _variant.get()
    kwargs.setdefault("lookup_context", LookupContext(variants=[variant] if variant else []))
    return ViewContext(controller, **kwargs)


def render_inline(
    component: Any,
    block: Any = None,
    *,
    view_context: ViewContext | None = None,
) -> Markup:
    """Render ``component`` (or a collection) and return its HTML.

    The result is also available from `rendered_component()`.
    """
    view = view_context if view_context is not None else build_view_context()
    html = view.render(component, block)
    _rendered.set(html)
    return html


def rendered_component() -> Markup | None:
    """HTML from the most recent `render_inline` call in this context."""
    return _rendered.get()


@contextmanager
def with_variant(variant: str) -> Iterator[str]:
    """Render with ``variant`` requested for the duration of the block."""
    token = _variant.set(variant)
    try:
        yield variant
    finally:
        _variant.reset(token)


def render_preview(
    preview_name: str,
    example: str,
    params: dict[str, Any] | None = None,
    *,
    view_context: ViewContext | None = None,
) -> Markup:
    """Render a preview example the way the preview harness would."""
    view = view_context if view_context is not None else build_view_context()
    html = _render_preview(view, preview_name, example, params=params)
    _rendered.set(html)
    return html
