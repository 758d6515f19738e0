"""Process-wide configuration for Tessera.

A single `Config` instance holds every setting. Updates are copy-on-write:
`configure()` swaps in a new instance, so a render already holding the old
config keeps a consistent view.

Usage:
    >>> from tessera.config import configure, get_config
    >>> configure(reload_templates=True, preview_paths=["previews/"])
    >>> get_config().reload_templates
    True

Environment variables (see `Config.from_env`):
    TESSERA_ROOT, TESSERA_COMPONENT_ROOT, TESSERA_RELOAD_TEMPLATES,
    TESSERA_TEST_CONTROLLER, TESSERA_SHOW_PREVIEWS, TESSERA_PREVIEW_PATHS,
    TESSERA_PREVIEW_ROUTE, TESSERA_DEFAULT_PREVIEW_LAYOUT

"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

import jinja2

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _finalize(value: Any) -> Any:
    return "" if value is None else value


def default_environment() -> jinja2.Environment:
    """Build the Jinja2 environment component templates are compiled with.

    Autoescaping is on and undefined names raise, so a typo in a component
    template fails loudly instead of rendering an empty string. None renders
    as nothing (a component rendered without a block has no ``content``).
    """
    return jinja2.Environment(
        autoescape=True,
        undefined=jinja2.StrictUndefined,
        finalize=_finalize,
        extensions=["jinja2.ext.do"],
    )


@dataclass
class Config:
    """Tessera settings.

    Attributes:
        root: Project root; `Component.short_identifier()` is relative to it
        component_root: Directory name that anchors component virtual paths
        template_extensions: Template file extensions picked up as sidecars
        reload_templates: Recompile components when template files change
        test_controller: Dotted path of the controller used by `tessera.testing`
        show_previews: Enable the preview harness
        preview_paths: Directories searched for ``*_preview.py`` files
        preview_route: URL prefix hosts mount previews under
        default_preview_layout: Layout template name applied to previews
        environment_factory: Builds the Jinja2 environment for component templates
    """

    root: str | None = None
    component_root: str = "components"
    template_extensions: tuple[str, ...] = ("jinja", "jinja2", "j2")
    reload_templates: bool = False
    test_controller: str = "tessera.testing.TestController"
    show_previews: bool = True
    preview_paths: list[str] = field(default_factory=list)
    preview_route: str = "/components"
    default_preview_layout: str | None = None
    environment_factory: Callable[[], jinja2.Environment] = default_environment

    _environment: jinja2.Environment | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def template_environment(self) -> jinja2.Environment:
        """Return the (lazily built) Jinja2 environment for component templates."""
        if self._environment is None:
            self._environment = self.environment_factory()
        return self._environment

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """Build a Config from ``TESSERA_*`` environment variables.

        Unset variables keep their defaults. ``TESSERA_PREVIEW_PATHS`` is
        split on `os.pathsep`.
        """
        env = os.environ if environ is None else environ
        changes: dict[str, Any] = {}
        if "TESSERA_ROOT" in env:
            changes["root"] = env["TESSERA_ROOT"]
        if "TESSERA_COMPONENT_ROOT" in env:
            changes["component_root"] = env["TESSERA_COMPONENT_ROOT"]
        if "TESSERA_RELOAD_TEMPLATES" in env:
            changes["reload_templates"] = env["TESSERA_RELOAD_TEMPLATES"].lower() in _TRUTHY
        if "TESSERA_TEST_CONTROLLER" in env:
            changes["test_controller"] = env["TESSERA_TEST_CONTROLLER"]
        if "TESSERA_SHOW_PREVIEWS" in env:
            changes["show_previews"] = env["TESSERA_SHOW_PREVIEWS"].lower() in _TRUTHY
        if "TESSERA_PREVIEW_PATHS" in env:
            changes["preview_paths"] = [
                p for p in env["TESSERA_PREVIEW_PATHS"].split(os.pathsep) if p
            ]
        if "TESSERA_PREVIEW_ROUTE" in env:
            changes["preview_route"] = env["TESSERA_PREVIEW_ROUTE"]
        if "TESSERA_DEFAULT_PREVIEW_LAYOUT" in env:
            changes["default_preview_layout"] = env["TESSERA_DEFAULT_PREVIEW_LAYOUT"]
        return cls(**changes)


_config = Config()


def get_config() -> Config:
    """Return the active configuration."""
    return _config


def configure(**changes: Any) -> Config:
    """Replace the active configuration with ``changes`` applied.

    Raises:
        TypeError: If a key is not a Config field
    """
    global _config
    _config = replace(_config, **changes)
    return _config


def set_config(config: Config) -> Config:
    """Install ``config`` as the active configuration, returning the previous one."""
    global _config
    previous, _config = _config, config
    return previous


def reset_config() -> Config:
    """Restore the default configuration."""
    global _config
    _config = Config()
    return _config
