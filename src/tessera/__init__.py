"""Tessera: server-side view components for Python web stacks.

A component is a Python class paired with a Jinja2 template. Templates
are compiled into render methods on the class, composed through slots and
content areas, and rendered through a per-request `ViewContext`.

Quickstart:
    ```
    # components/alert_component.py
    from tessera import Component

    class AlertComponent(Component):
        def __init__(self, level: str = "info"):
            self.level = level

    # components/alert_component.html.jinja
    <div class="alert alert-{{ level }}">{{ content }}</div>
    ```

    >>> from tessera import ViewContext
    >>> view = ViewContext()
    >>> view.render(AlertComponent(level="warning"), "Disk almost full")
    Markup('<div class="alert alert-warning">Disk almost full</div>')

Architecture:
Component class → Compiler (once per class) → call / call_<variant> → render_in()

1. **Compiler**: discovers sidecar templates, validates them, compiles them
   with Jinja2 and defines render methods on the class
2. **CompileCache**: process-wide record of compiled classes
3. **render_in**: binds the view context, captures the block, picks the
   variant and dispatches to the compiled method

Composition:
- Content: the render block, available as ``content``
- Content areas: ``with_content_areas(...)`` + ``component.with_area(...)``
- Slots: ``with_slot(...)`` + ``component.slot(...)``
- Collections: ``Component.with_collection(items)``

"""

from tessera.base import Component
from tessera.collection import Collection, Iteration
from tessera.compile_cache import CompileCache
from tessera.compiler import Compiler
from tessera.config import Config, configure, get_config, reset_config
from tessera.exceptions import (
    CollectionParameterError,
    ComponentError,
    DuplicateSlotError,
    ErrorCode,
    InvalidCollectionError,
    InvalidSlotClassError,
    PreviewError,
    PreviewNotFoundError,
    PreviewsDisabledError,
    ReservedNameError,
    TemplateError,
    TemplateSyntaxError,
    UnknownContentAreaError,
    UnknownSlotError,
    ViewContextCalledBeforeRenderError,
)
from tessera.hooks import on_load, run_load_hooks
from tessera.preview import Preview
from tessera.previewable import render_preview
from tessera.slot import Slot
from tessera.view_context import (
    LookupContext,
    ViewContext,
    ViewFlow,
    current_component,
    get_current_component,
)

__version__ = "0.1.0"

__all__ = [
    "Collection",
    "CollectionParameterError",
    "CompileCache",
    "Compiler",
    "Component",
    "ComponentError",
    "Config",
    "DuplicateSlotError",
    "ErrorCode",
    "InvalidCollectionError",
    "InvalidSlotClassError",
    "Iteration",
    "LookupContext",
    "Preview",
    "PreviewError",
    "PreviewNotFoundError",
    "PreviewsDisabledError",
    "ReservedNameError",
    "Slot",
    "TemplateError",
    "TemplateSyntaxError",
    "UnknownContentAreaError",
    "UnknownSlotError",
    "ViewContext",
    "ViewContextCalledBeforeRenderError",
    "ViewFlow",
    "__version__",
    "configure",
    "current_component",
    "get_config",
    "get_current_component",
    "on_load",
    "render_preview",
    "reset_config",
    "run_load_hooks",
]
