"""Component base class.

A component is a Python class paired with a template. The class holds
render-time data; the template (compiled into a ``call`` method by
`tessera.compiler.Compiler`) turns it into HTML.

Example:
    ```
    # components/greeting_component.py
    class GreetingComponent(Component):
        def __init__(self, title: str):
            self.title = title

    # components/greeting_component.html.jinja
    <span title="{{ title }}">Hello, {{ content }}!</span>
    ```

    >>> view.render(GreetingComponent(title="greeting"), "world")
    Markup('<span title="greeting">Hello, world!</span>')

Render Lifecycle (`Component.render_in`):
1. Compile the class if needed (raising on template errors)
2. Bind the view context and pick the variant (explicit `with_variant`,
   else the first requested by the lookup context)
3. Capture the block (if any) into `content`; the block receives the
   component, so it can fill slots and content areas
4. `before_render()`, then `should_render()`
5. Call the compiled ``render_template_for(variant)``

Subclassing:
Defining a subclass compiles its parents first, so the subclass inherits
their compiled ``call*`` methods. It also records where the class was
defined (`source_location`, `virtual_path`) and takes a private copy of
the parent's slot declarations.

"""

from __future__ import annotations

import inspect
import os
import re
import threading
from typing import TYPE_CHECKING, Any, ClassVar

from markupsafe import Markup, escape

from tessera.collection import Collection
from tessera.compiler import Compiler
from tessera.config import get_config
from tessera.exceptions import (
    CollectionParameterError,
    ReservedNameError,
    TemplateError,
    UnknownContentAreaError,
    ViewContextCalledBeforeRenderError,
)
from tessera.hooks import run_load_hooks
from tessera.previewable import Previewable
from tessera.slotable import Slotable
from tessera.utils.inflection import remove_suffix, underscore
from tessera.view_context import reset_current_component, set_current_component

if TYPE_CHECKING:
    from tessera.view_context import Block, LookupContext, ViewContext, ViewFlow

_compiler_lock = threading.Lock()


def _source_location(cls: type) -> str | None:
    try:
        return os.path.abspath(inspect.getfile(cls))
    except (TypeError, OSError):
        return None


def _virtual_path(source_location: str | None) -> str | None:
    """Strip everything up to the component root directory and the ``.py`` suffix."""
    if source_location is None:
        return None
    root = re.escape(get_config().component_root)
    path = source_location.replace(os.sep, "/")
    return re.sub(rf"(^.*/{root}(?=/))|(\.py$)", "", path)


def _area_accessor(area: str) -> property:
    storage = f"_area_{area}"

    def read_area(self: Any) -> Any:
        return self.__dict__.get(storage)

    # An initializer assigning self.<area> fills the same storage as with_area()
    def write_area(self: Any, value: Any) -> None:
        self.__dict__[storage] = value

    return property(read_area, write_area)


class Component(Slotable, Previewable):
    """Base class for view components.

    Class Attributes:
        content_areas: Names accepted by `with_area`
        slots: Declared slots (see `tessera.slotable`)
        source_location: Absolute path of the module defining the class
        virtual_path: `source_location` relative to the component root,
            without suffix (``/cards/card_component``)
        inline_template: Default template source embedded in the class
        template_path: Default template file, relative to the module

    Instance state is set at render time; components do not need to call
    ``super().__init__()``.
    """

    content_areas: ClassVar[tuple[str, ...]] = ()
    slots: ClassVar[dict[str, dict[str, Any]]] = {}
    source_location: ClassVar[str | None] = None
    virtual_path: ClassVar[str | None] = None
    inline_template: ClassVar[str | None] = None
    template_path: ClassVar[str | None] = None

    _view_context: ViewContext | None = None
    _lookup_context: LookupContext | None = None
    _view_flow: ViewFlow | None = None
    _variant: str | None = None
    _content: Markup | None = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        # Compile parents so the child inherits their compiled call* methods
        for base in cls.__bases__:
            if isinstance(base, type) and issubclass(base, Component) and base is not Component:
                base.compile()

        cls.source_location = _source_location(cls)
        cls.virtual_path = _virtual_path(cls.source_location)

        # Each class gets its own slot table
        cls.slots = dict(cls.slots)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} variant={self._variant!r}>"

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_in(self, view_context: ViewContext, block: Block | None = None) -> Markup:
        """Render the component within ``view_context``.

        Args:
            view_context: Per-request rendering environment
            block: Optional block captured into `content`; it is called
                with the component when it accepts an argument

        Returns:
            HTML; a plain string returned by a hand-written ``call`` is escaped

        Raises:
            TemplateError: The component's templates are invalid
        """
        type(self).compile(raise_errors=True)

        self._view_context = view_context
        self._lookup_context = view_context.lookup_context
        self._view_flow = view_context.view_flow

        # For template variants (phone, desktop, ...)
        if self._variant is None:
            variants = self._lookup_context.variants
            self._variant = variants[0] if variants else None

        token = set_current_component(self)
        try:
            if block is not None:
                self._content = view_context.capture(block, self)

            self.before_render()

            if self.should_render():
                return escape(self.render_template_for(self._variant))
            return Markup("")
        finally:
            reset_current_component(token)

    def render_template_for(self, variant: str | None = None) -> Markup:
        # Replaced per class by Compiler.compile()
        raise TemplateError(
            f"{type(self).__name__} has not been compiled.",
            component=type(self).__name__,
        )

    def before_render(self) -> None:
        self.before_render_check()

    def before_render_check(self) -> None:
        pass

    def should_render(self) -> bool:
        """Return False to skip rendering (render_in then returns empty markup)."""
        return True

    def render(self, renderable: Any, *args: Any, **kwargs: Any) -> Markup:
        """Render a nested component or template through the view context."""
        return self.helpers.render(renderable, *args, **kwargs)

    def template_context(self) -> dict[str, Any]:
        """Variables the compiled template renders with.

        Includes view helpers, public instance attributes, slots, content
        areas and: ``self``, ``content``, ``render``, ``helpers``,
        ``content_for``, ``variant``.
        """
        view = self._view_context
        context: dict[str, Any] = view.helper_functions() if view is not None else {}
        context.update((k, v) for k, v in vars(self).items() if not k.startswith("_"))
        context.update(self.slot_values())
        context.update((area, getattr(self, area)) for area in type(self).content_areas)
        context.update(
            self=self,
            content=self._content,
            render=self.render,
            helpers=view,
            content_for=self.content_for,
            variant=self._variant,
        )
        return context

    # ------------------------------------------------------------------
    # Render-time state
    # ------------------------------------------------------------------

    @property
    def view_context(self) -> ViewContext | None:
        return self._view_context

    @property
    def content(self) -> Markup | None:
        return self._content

    @property
    def variant(self) -> str | None:
        return self._variant

    @property
    def controller(self) -> Any:
        if self._view_context is None:
            raise ViewContextCalledBeforeRenderError(
                "`controller` can only be called at render time.",
                component=type(self).__name__,
            )
        return self._view_context.controller

    @property
    def helpers(self) -> ViewContext:
        """Proxy to the view context's helper methods."""
        if self._view_context is None:
            raise ViewContextCalledBeforeRenderError(
                "`helpers` can only be called at render time.",
                component=type(self).__name__,
            )
        return self._view_context

    @property
    def request(self) -> Any:
        """The current request.

        Use sparingly: it couples the component to the request cycle.
        """
        return self.controller.request

    @property
    def config(self) -> Any:
        return self.helpers.config

    def form_authenticity_token(self) -> str | None:
        return self.helpers.form_authenticity_token()

    def protect_against_forgery(self) -> bool:
        return self.helpers.protect_against_forgery()

    def content_for(self, name: str, content: Any = None, *, block: Block | None = None) -> Markup | None:
        return self.helpers.content_for(name, content, block=block)

    def view_cache_dependencies(self) -> list[str]:
        return []

    def with_area(self, area: str, content: Any = None, block: Block | None = None) -> None:
        """Assign content to a declared content area.

        Raises:
            UnknownContentAreaError: ``area`` was not declared
        """
        content_areas = type(self).content_areas
        if area not in content_areas:
            raise UnknownContentAreaError(
                f"Unknown content_area '{area}' - expected one of '{content_areas}'",
                component=type(self).__name__,
                suggestion=f"Declare it with {type(self).__name__}.with_content_areas({area!r})",
            )
        if block is not None:
            content = self.helpers.capture(block)
        self.__dict__[f"_area_{area}"] = content
        return None

    def with_variant(self, variant: str | None) -> Component:
        self._variant = variant
        return self

    # ------------------------------------------------------------------
    # Class-level API
    # ------------------------------------------------------------------

    @classmethod
    def template_compiler(cls) -> Compiler:
        """The class's own Compiler (created on first use, never inherited)."""
        compiler = cls.__dict__.get("_template_compiler")
        if compiler is None:
            with _compiler_lock:
                compiler = cls.__dict__.get("_template_compiler")
                if compiler is None:
                    compiler = Compiler(cls)
                    cls._template_compiler = compiler
        return compiler

    @classmethod
    def compiled(cls) -> bool:
        return cls.template_compiler().compiled()

    @classmethod
    def compile(cls, raise_errors: bool = False) -> bool:
        """Compile templates to methods, unless already compiled."""
        return cls.template_compiler().compile(raise_errors=raise_errors)

    @classmethod
    def with_collection(cls, collection: Any, **kwargs: Any) -> Collection:
        """Render this component once per item of ``collection``."""
        return Collection(cls, collection, **kwargs)

    @classmethod
    def short_identifier(cls) -> str | None:
        """`source_location` relative to the configured project root."""
        root = get_config().root
        location = cls.source_location
        if root and location:
            prefix = os.path.join(os.path.abspath(root), "")
            if location.startswith(prefix):
                return location[len(prefix) :]
        return location

    @classmethod
    def identifier(cls) -> str | None:
        return cls.source_location

    @classmethod
    def type(cls) -> str:
        return "text/html"

    @classmethod
    def format(cls) -> str:
        return "html"

    @classmethod
    def with_content_areas(cls, *areas: str) -> None:
        """Declare content areas; each becomes a read-only attribute.

        Raises:
            ReservedNameError: ``content`` is among ``areas``
        """
        if "content" in areas:
            raise ReservedNameError(
                "content is a reserved content area name. Please use another name, such as 'body'",
                component=cls.__name__,
            )
        for area in areas:
            setattr(cls, area, _area_accessor(area))
        cls.content_areas = tuple(areas)

    # Collection parameters

    @classmethod
    def with_collection_parameter(cls, parameter: str) -> None:
        """Override the initializer argument collection items are passed as."""
        cls._provided_collection_parameter = parameter

    @classmethod
    def provided_collection_parameter(cls) -> str | None:
        return cls.__dict__.get("_provided_collection_parameter")

    @classmethod
    def collection_parameter(cls) -> str:
        provided = cls.provided_collection_parameter()
        if provided:
            return provided
        return remove_suffix(underscore(cls.__name__), "_component")

    @classmethod
    def collection_counter_parameter(cls) -> str:
        return f"{cls.collection_parameter()}_counter"

    @classmethod
    def collection_iteration_parameter(cls) -> str:
        return f"{cls.collection_parameter()}_iteration"

    @classmethod
    def counter_argument_present(cls) -> bool:
        return cls.collection_counter_parameter() in cls.initialize_parameters()

    @classmethod
    def iteration_argument_present(cls) -> bool:
        return cls.collection_iteration_parameter() in cls.initialize_parameters()

    @classmethod
    def initialize_parameters(cls) -> list[str]:
        """Named parameters of ``__init__`` (excluding ``self`` and ``*``/``**`` catch-alls)."""
        try:
            signature = inspect.signature(cls.__init__)
        except (TypeError, ValueError):
            return []
        params = list(signature.parameters.values())[1:]
        return [p.name for p in params if p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)]

    @classmethod
    def validate_collection_parameter(cls, validate_default: bool = False) -> None:
        """Ensure the initializer accepts the collection parameter.

        Without ``validate_default`` only an explicitly provided parameter is
        checked: collection rendering is optional.

        Raises:
            CollectionParameterError: The initializer does not accept it
        """
        parameter = cls.collection_parameter() if validate_default else cls.provided_collection_parameter()
        if not parameter:
            return

        parameters = cls.initialize_parameters()
        if parameter in parameters:
            return

        if not parameters:
            raise CollectionParameterError(
                f"{cls.__name__} initializer is empty or invalid.",
                component=cls.__name__,
            )
        raise CollectionParameterError(
            f"{cls.__name__} initializer must accept `{parameter}` collection parameter.",
            component=cls.__name__,
            suggestion=f"Add `{parameter}` to {cls.__name__}.__init__ or call with_collection_parameter()",
        )


run_load_hooks("component", Component)
