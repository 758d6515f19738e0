"""Shared pytest configuration for tessera examples.

Provides the ``example_app`` fixture that loads and executes the ``app.py``
file in the same directory as the test.  Each call re-executes app.py in an
isolated module namespace so every test starts with clean state.

The module is registered in ``sys.modules`` while it runs: components
locate their sidecar templates through the module that defines them.
"""

import importlib.util
import sys
from pathlib import Path

import pytest

from tessera import reset_config


@pytest.fixture
def example_app(request: pytest.FixtureRequest):
    """Load a fresh module from the sibling app.py next to the test file."""
    app_path = Path(request.path).parent / "app.py"
    module_name = f"example_{app_path.parent.name}"
    spec = importlib.util.spec_from_file_location(module_name, app_path)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    yield module
    sys.modules.pop(module_name, None)
    reset_config()
