"""Component template compiler.

The Compiler turns a component class's templates into render methods on
the class itself, once per process:

    ```
    card_component.py               class CardComponent(Component)
    card_component.html.jinja  -->    def call(self)             # default
    card_component.html+phone.jinja   def call_phone(self)       # variant
                                      def render_template_for(self, variant)
    ```

Template Discovery:
Templates are found next to the module that defines the component, or in
a sidecar directory named after the module (or the component), by the
snake-cased class name:

    ```
    <name>[.<format>][+<variant>].<ext>      ext: jinja | jinja2 | j2
    ```

A class may instead name its default template with ``template_path``
(relative to its module directory) or embed it as ``inline_template``.
Inline render methods (``def call(self)`` / ``def call_<variant>(self)``)
replace templates entirely.

Validation:
All problems are collected before anything is compiled: a component with
neither template nor inline ``call``, a template plus an inline ``call``,
several default templates, several templates for one variant, or a
variant that has both a template and an inline method. `compile()` raises
them together as `TemplateError` when ``raise_errors=True`` and otherwise
returns False, so a broken parent does not break subclass definition.

Dispatch:
``render_template_for(variant)`` is generated per class after compilation.
It maps every ``call_<variant>`` visible through the MRO (so subclasses
pick up their parents' compiled templates) and falls back to ``call``.

Thread-Safety:
Compilation is write-once per class under a re-entrant lock; compiled
methods are plain functions and safe to call concurrently.

"""

from __future__ import annotations

import logging
import os
import re
import threading
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import jinja2
from markupsafe import Markup

from tessera.compile_cache import CompileCache
from tessera.config import get_config
from tessera.exceptions import TemplateError, TemplateSyntaxError
from tessera.utils.inflection import identifier, underscore

if TYPE_CHECKING:
    from tessera.base import Component

logger = logging.getLogger(__name__)

CALL_METHOD = "call"
_VARIANT_PREFIX = "call_"
_COMPILED_MARKER = "_tessera_compiled"


@dataclass(frozen=True, slots=True)
class ComponentTemplate:
    """A template discovered for a component class.

    Attributes:
        path: Template file path, or None for ``inline_template``
        variant: Variant name (``"phone"``), or None for the default template
        format: Format segment of the file name (``"html"``), if any
        source: Inline template source, or None for file templates
    """

    path: str | None
    variant: str | None = None
    format: str | None = None
    source: str | None = None

    @property
    def method_name(self) -> str:
        return call_method_name(self.variant)

    def read(self) -> str:
        if self.source is not None:
            return self.source
        if self.path is None:
            raise TemplateError("Template has neither a file path nor inline source.")
        return Path(self.path).read_text("utf-8")


def call_method_name(variant: str | None) -> str:
    """Name of the render method for ``variant`` (``call`` for the default)."""
    if not variant:
        return CALL_METHOD
    return f"{_VARIANT_PREFIX}{identifier(str(variant))}"


def _template_name_pattern(name: str, extensions: tuple[str, ...]) -> re.Pattern[str]:
    exts = "|".join(re.escape(ext) for ext in extensions)
    return re.compile(
        rf"^{re.escape(name)}"
        r"(?:\.(?P<format>[A-Za-z0-9_]+))?"
        r"(?:\+(?P<variant>[\w-]+))?"
        rf"\.(?:{exts})$"
    )


def _is_call_name(name: str) -> bool:
    return name == CALL_METHOD or name.startswith(_VARIANT_PREFIX)


class Compiler:
    """Compile one component class's templates into render methods.

    Each component class owns exactly one Compiler (see
    `Component.template_compiler`); it is never shared with subclasses.

    Attributes:
        component_class: The class whose templates are compiled
    """

    __slots__ = ("_compiled", "_compiled_methods", "_component_class", "_lock", "_mtimes")

    def __init__(self, component_class: type[Component]):
        self._component_class = component_class
        self._compiled = False
        self._lock = threading.RLock()
        # Names of methods this compiler defined on the class
        self._compiled_methods: list[str] = []
        # Template file path -> mtime at compile time (for reload_templates)
        self._mtimes: dict[str, float] = {}

    def __repr__(self) -> str:
        state = "compiled" if self._compiled else "pending"
        return f"<Compiler {self._component_class.__name__} {state}>"

    @property
    def component_class(self) -> type[Component]:
        return self._component_class

    def compiled(self) -> bool:
        """True when compiled and (with ``reload_templates``) still fresh."""
        if not self._compiled:
            return False
        if get_config().reload_templates and self._templates_changed():
            return False
        return True

    def compile(self, raise_errors: bool = False) -> bool:
        """Compile templates to methods unless already compiled.

        Do as much work as possible here: it runs once per class, while
        the methods it defines run on every render.

        Args:
            raise_errors: Raise `TemplateError` instead of returning False

        Returns:
            True when the class is compiled, False when it has errors

        Raises:
            TemplateError: Invalid template setup (``raise_errors`` only)
            CollectionParameterError: Initializer rejects the provided
                collection parameter (``raise_errors`` only)
        """
        # Parents may have been invalidated or reloaded since this class was defined
        self._compile_parents()
        if self.compiled():
            return True

        with self._lock:
            if self.compiled():
                return True
            if self._compiled:
                logger.info("Templates for %s changed, recompiling", self._component_class.__name__)
                self.reset()
            return self._compile_locked(raise_errors)

    def recompile(self, raise_errors: bool = True) -> bool:
        """Drop compiled methods and compile again."""
        with self._lock:
            self.reset()
            return self._compile_locked(raise_errors)

    def reset(self) -> None:
        """Remove the methods this compiler defined and mark it uncompiled."""
        with self._lock:
            cls = self._component_class
            for name in self._compiled_methods:
                method = cls.__dict__.get(name)
                if method is not None and getattr(method, _COMPILED_MARKER, False):
                    delattr(cls, name)
            self._compiled_methods = []
            self._mtimes = {}
            self._compiled = False
            CompileCache.invalidate_class(cls)

    def _compile_parents(self) -> None:
        from tessera.base import Component

        for base in self._component_class.__bases__:
            if isinstance(base, type) and issubclass(base, Component) and base is not Component:
                base.compile()

    def _compile_locked(self, raise_errors: bool) -> bool:
        cls = self._component_class
        name = cls.__name__

        errors = self.template_errors()
        if errors:
            if raise_errors:
                raise TemplateError(errors, component=name)
            logger.debug("Skipping compilation of %s: %s", name, "; ".join(errors))
            return False

        try:
            compiled = [(template, self._compile_template(template)) for template in self.templates()]
        except TemplateSyntaxError:
            if raise_errors:
                raise
            logger.debug("Skipping compilation of %s: template syntax error", name, exc_info=True)
            return False

        if raise_errors:
            cls.validate_collection_parameter()

        for template, jinja_template in compiled:
            self._define_method(template.method_name, _build_render_method(jinja_template))
            if template.path is not None:
                self._mtimes[template.path] = os.stat(template.path).st_mtime
        self._define_method("render_template_for", self._build_dispatcher())

        CompileCache.register(cls)
        self._compiled = True
        logger.debug(
            "Compiled %s (%d template(s), variants: %s)",
            name,
            len(compiled),
            ", ".join(sorted(t.variant for t, _ in compiled if t.variant)) or "none",
        )
        return True

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def templates(self) -> list[ComponentTemplate]:
        """Discover the class's own templates (inherited ones are not listed)."""
        cls = self._component_class
        found: list[ComponentTemplate] = []

        inline = cls.__dict__.get("inline_template")
        if inline is not None:
            found.append(ComponentTemplate(path=None, source=inline))

        location = getattr(cls, "source_location", None)
        if not location:
            return found
        directory = Path(location).parent

        template_path = cls.__dict__.get("template_path")
        if template_path:
            found.append(ComponentTemplate(path=str(directory / template_path)))
            return found

        name = underscore(cls.__name__)
        pattern = _template_name_pattern(name, tuple(get_config().template_extensions))
        search_dirs = dict.fromkeys([directory, directory / Path(location).stem, directory / name])
        for search_dir in search_dirs:
            if not search_dir.is_dir():
                continue
            for path in sorted(search_dir.iterdir()):
                match = pattern.match(path.name)
                if match is None or not path.is_file():
                    continue
                found.append(
                    ComponentTemplate(
                        path=str(path),
                        variant=match.group("variant"),
                        format=match.group("format"),
                    )
                )
        return found

    def inline_calls(self) -> list[str]:
        """Render methods visible to the class, including inherited and compiled ones."""
        from tessera.base import Component

        names: dict[str, None] = {}
        for klass in self._component_class.__mro__:
            if klass is Component:
                break
            if not issubclass(klass, Component):
                continue
            for attr, value in klass.__dict__.items():
                if _is_call_name(attr) and callable(value):
                    names.setdefault(attr)
        return list(names)

    def inline_calls_defined_on_self(self) -> list[str]:
        """Render methods written by hand on this class (compiled ones excluded)."""
        return [
            attr
            for attr, value in self._component_class.__dict__.items()
            if _is_call_name(attr)
            and callable(value)
            and not getattr(value, _COMPILED_MARKER, False)
        ]

    def variants(self) -> list[str]:
        return sorted({t.variant for t in self.templates() if t.variant})

    def template_errors(self) -> list[str]:
        """Collect every template setup problem for the class."""
        cls = self._component_class
        name = cls.__name__
        templates = self.templates()
        inline_calls = self.inline_calls()
        own_calls = self.inline_calls_defined_on_self()
        errors: list[str] = []

        if not templates and not inline_calls:
            errors.append(f"Could not find a template file for {name}.")

        default_templates = [t for t in templates if t.variant is None]
        if default_templates and CALL_METHOD in own_calls:
            errors.append(
                f"Template file and inline render method found for {name}. "
                "There can only be a template file or inline render method per component."
            )

        if len(default_templates) > 1:
            errors.append(
                f"More than one template found for {name}. "
                "There can only be one default template file per component."
            )

        counts = Counter(t.variant for t in templates if t.variant)
        duplicated = sorted(variant for variant, count in counts.items() if count > 1)
        if duplicated:
            quoted = ", ".join(f"'{v}'" for v in duplicated)
            errors.append(
                f"More than one template found for variants {quoted} in {name}. "
                "There can only be one template file per variant."
            )

        conflicts = sorted(v for v in counts if call_method_name(v) in own_calls)
        if conflicts:
            quoted = ", ".join(f"'{v}'" for v in conflicts)
            errors.append(
                f"Template file and inline render method found for variant(s) {quoted} in {name}. "
                "There can only be a template file or inline render method per variant."
            )

        return errors

    # ------------------------------------------------------------------
    # Code generation
    # ------------------------------------------------------------------

    def _compile_template(self, template: ComponentTemplate) -> jinja2.Template:
        cls = self._component_class
        env = get_config().template_environment()
        template_name = str(getattr(cls, "virtual_path", None) or cls.__name__)
        if template.variant:
            template_name += f"+{template.variant}"
        filename = template.path or "<inline>"
        try:
            source = template.read()
            code = env.compile(source, name=template_name, filename=filename)
        except jinja2.TemplateSyntaxError as exc:
            raise TemplateSyntaxError(
                exc.message or str(exc),
                filename=filename,
                lineno=exc.lineno,
                component=cls.__name__,
            ) from exc
        return env.template_class.from_code(env, code, env.make_globals(None))

    def _define_method(self, name: str, func: Callable[..., Any]) -> None:
        cls = self._component_class
        func.__name__ = name
        func.__qualname__ = f"{cls.__qualname__}.{name}"
        setattr(func, _COMPILED_MARKER, True)
        setattr(cls, name, func)
        self._compiled_methods.append(name)

    def _build_dispatcher(self) -> Callable[..., Markup]:
        """Build ``render_template_for`` over every variant method in the MRO."""
        from tessera.base import Component

        variant_methods: dict[str, str] = {}
        for klass in reversed(self._component_class.__mro__):
            if not (isinstance(klass, type) and issubclass(klass, Component)):
                continue
            for attr in klass.__dict__:
                if attr.startswith(_VARIANT_PREFIX):
                    variant_methods[attr[len(_VARIANT_PREFIX) :]] = attr

        def render_template_for(self: Component, variant: str | None = None) -> Markup:
            if variant:
                method_name = variant_methods.get(identifier(str(variant)))
                if method_name is not None:
                    return getattr(self, method_name)()
            return self.call()

        render_template_for.variants = tuple(sorted(variant_methods))  # type: ignore[attr-defined]
        return render_template_for

    def _templates_changed(self) -> bool:
        for path, mtime in self._mtimes.items():
            try:
                if os.stat(path).st_mtime != mtime:
                    return True
            except FileNotFoundError:
                return True
        return False


def _build_render_method(template: jinja2.Template) -> Callable[..., Markup]:
    def render(self: Component) -> Markup:
        return Markup(template.render(self.template_context()))

    return render
