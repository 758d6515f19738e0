"""Pytest configuration and fixtures for Tessera tests."""

import importlib.util
import sys
from pathlib import Path

import jinja2
import pytest

from tessera import CompileCache, LookupContext, Preview, ViewContext, reset_config
from tessera.testing import TestController

TESTS_DIR = Path(__file__).parent


@pytest.fixture(autouse=True)
def _restore_config():
    """Every test starts and ends with the default configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def controller():
    """A test controller with CSRF protection enabled."""
    return TestController()


@pytest.fixture
def host_env():
    """Host Jinja2 environment with a layout and a few partials."""
    loader = jinja2.DictLoader(
        {
            "layout.html": "<html><head>{{ content_for('head') }}</head><body>{{ content }}</body></html>",
            "partial.html": "<p>{{ message }}</p>",
            "with_card.html": (
                "{% call render(card) %}Card from {{ place }}{% endcall %}"
            ),
            "preview_layout.html": '<div class="preview">{{ content }}</div>',
            "card_component/in_a_page.html.jinja": "<article>{{ title }}</article>",
        }
    )
    return jinja2.Environment(loader=loader, autoescape=True)


@pytest.fixture
def view(controller, host_env):
    """ViewContext without a requested variant."""
    return ViewContext(controller, environment=host_env)


@pytest.fixture
def phone_view(controller, host_env):
    """ViewContext requesting the ``phone`` variant."""
    return ViewContext(
        controller,
        lookup_context=LookupContext(variants=["phone"]),
        environment=host_env,
    )


@pytest.fixture
def previews_dir():
    return TESTS_DIR / "previews"


@pytest.fixture
def clean_previews():
    """Empty the preview registry and unload preview modules around a test."""

    def unload():
        Preview.clear()
        for name in [m for m in sys.modules if m.startswith("tessera_previews")]:
            del sys.modules[name]

    unload()
    yield
    unload()


@pytest.fixture
def component_module(tmp_path):
    """Write a component module (and its templates) to disk and import it.

    Usage:
        mod = component_module("alert_component", source, {"alert_component.html.jinja": "..."})
    """
    loaded: list[str] = []

    def factory(name: str, source: str, templates: dict[str, str] | None = None):
        for filename, body in (templates or {}).items():
            path = tmp_path / filename
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(body)
        module_path = tmp_path / f"{name}.py"
        module_path.write_text(source)

        module_name = f"tessera_test_{name}"
        spec = importlib.util.spec_from_file_location(module_name, module_path)
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
        loaded.append(module_name)
        return module

    yield factory

    for module_name in loaded:
        sys.modules.pop(module_name, None)


@pytest.fixture
def invalidate_compile_cache():
    """Drop every compiled component after the test."""
    yield
    CompileCache.invalidate()

