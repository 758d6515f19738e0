"""Component previews: example renders for manual QA.

A preview class groups examples of one component. Each public method is
an example returning what to render:

    # previews/card_component_preview.py
    class CardComponentPreview(Preview):
        def default(self):
            return self.render(CardComponent(title="Hello"), "Body")

        def with_title(self, title: str = "Custom"):
            return self.render(CardComponent(title=title))

        def in_a_page(self):
            return self.render_with_template(locals={"title": "Page"})

Preview classes register themselves when defined. `Preview.all()` loads
``*_preview.py`` files from the configured ``preview_paths`` the first
time it finds none registered.

"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
import textwrap
from pathlib import Path
from typing import Any, ClassVar

from tessera.config import get_config
from tessera.exceptions import PreviewNotFoundError
from tessera.utils.inflection import remove_suffix, underscore

logger = logging.getLogger(__name__)

_PREVIEW_MODULE_PREFIX = "tessera_previews"


class Preview:
    """Base class for component previews."""

    _registry: ClassVar[list[type[Preview]]] = []

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        key = (cls.__module__, cls.__qualname__)
        # Reloading a preview module replaces its classes
        Preview._registry[:] = [
            p for p in Preview._registry if (p.__module__, p.__qualname__) != key
        ]
        Preview._registry.append(cls)

    # Example return values

    def render(self, component: Any, block: Any = None, **args: Any) -> dict[str, Any]:
        return {"component": component, "args": args, "block": block}

    def render_with_template(
        self,
        template: str | None = None,
        locals: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return {"template": template, "locals": locals or {}}

    # Registry

    @classmethod
    def all(cls) -> list[type[Preview]]:
        """Every preview class, loading preview files when none are registered."""
        if not Preview._registry:
            load_previews()
        return list(Preview._registry)

    @classmethod
    def find(cls, preview: str) -> type[Preview] | None:
        """Find a preview by its snake-cased name (``card_component``)."""
        return next((p for p in cls.all() if p.preview_name() == preview), None)

    @classmethod
    def exists(cls, preview: str) -> bool:
        return cls.find(preview) is not None

    @classmethod
    def clear(cls) -> None:
        """Forget every registered preview class."""
        Preview._registry.clear()

    # Introspection

    @classmethod
    def preview_name(cls) -> str:
        return remove_suffix(underscore(cls.__name__), "_preview")

    @classmethod
    def examples(cls) -> list[str]:
        """Names of the examples defined on this preview class."""
        return sorted(
            name
            for name, value in cls.__dict__.items()
            if not name.startswith("_") and inspect.isfunction(value)
        )

    @classmethod
    def component(cls) -> type | None:
        """The component class this preview is for (``FooPreview`` -> ``Foo``)."""
        from tessera.base import Component

        name = remove_suffix(cls.__name__, "Preview")
        module = sys.modules.get(cls.__module__)
        candidate = getattr(module, name, None) if module is not None else None
        if isinstance(candidate, type) and issubclass(candidate, Component):
            return candidate

        pending = list(Component.__subclasses__())
        while pending:
            klass = pending.pop()
            if klass.__name__ == name:
                return klass
            pending.extend(klass.__subclasses__())
        return None

    @classmethod
    def layout(cls, layout_name: str | bool | None) -> None:
        """Set the layout for this preview's examples (False disables layouts)."""
        cls._layout = layout_name

    @classmethod
    def layout_name(cls) -> str | bool | None:
        return cls.__dict__.get("_layout")

    @classmethod
    def render_args(cls, example: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run ``example`` and return its render arguments plus ``layout``.

        Only the ``params`` the example method accepts are passed to it.

        Raises:
            PreviewNotFoundError: ``example`` is not defined on the preview
        """
        if example not in cls.examples():
            raise PreviewNotFoundError(
                f"Preview example '{example}' not found in {cls.__name__}; "
                f"available: {', '.join(cls.examples()) or 'none'}",
            )
        method = getattr(cls, example)
        accepted = list(inspect.signature(method).parameters)[1:]
        provided = {k: v for k, v in (params or {}).items() if k in accepted}

        result = dict(getattr(cls(), example)(**provided))
        result["layout"] = cls.layout_name()
        return result

    @classmethod
    def preview_source(cls, example: str) -> str:
        """Source code of an example method, dedented."""
        return textwrap.dedent(inspect.getsource(getattr(cls, example)))

    @classmethod
    def preview_example_template_path(cls, example: str) -> str | None:
        """Template for ``example`` under a preview path, relative to it, if present.

        Looks for ``<preview_name>/<example>.<format>.<ext>`` or
        ``<preview_name>/<example>.<ext>``.
        """
        config = get_config()
        for preview_path in config.preview_paths:
            base = Path(preview_path)
            directory = base / cls.preview_name()
            if not directory.is_dir():
                continue
            for ext in config.template_extensions:
                for candidate in sorted(directory.glob(f"{example}*.{ext}")):
                    stem = candidate.name[: -len(ext) - 1]
                    if stem == example or stem.split(".")[0] == example:
                        return candidate.relative_to(base).as_posix()
        return None


def load_previews() -> list[str]:
    """Import every ``*_preview.py`` file under the configured preview paths.

    Returns:
        Module names that were imported
    """
    loaded: list[str] = []
    for preview_path in get_config().preview_paths:
        base = Path(preview_path)
        if not base.is_dir():
            logger.debug("Preview path %s does not exist", base)
            continue
        for path in sorted(base.rglob("*_preview.py")):
            relative = path.relative_to(base).with_suffix("")
            module_name = ".".join((_PREVIEW_MODULE_PREFIX, *relative.parts))
            if module_name in sys.modules:
                continue
            spec = importlib.util.spec_from_file_location(module_name, path)
            if spec is None or spec.loader is None:
                continue
            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            try:
                spec.loader.exec_module(module)
            except BaseException:
                del sys.modules[module_name]
                raise
            logger.debug("Loaded preview module %s from %s", module_name, path)
            loaded.append(module_name)
    return loaded
