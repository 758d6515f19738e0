"""Benchmark fixtures comparing tessera components with plain Jinja2 partials."""

from __future__ import annotations

import importlib.metadata as importlib_metadata
import json
import os
import platform
import sys
from pathlib import Path

import pytest
from jinja2 import Environment as Jinja2Environment
from jinja2 import FileSystemLoader as Jinja2FileSystemLoader

from tessera import ViewContext
from tessera.testing import TestController

BASE_DIR = Path(__file__).resolve().parent
TEMPLATE_DIR = BASE_DIR / "templates"
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"
BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)


def _version(dist: str) -> str:
    try:
        return importlib_metadata.version(dist)
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def collect_environment_metadata() -> dict[str, object]:
    """Capture reproducibility metadata for each benchmark run."""
    return {
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
            "executable": sys.executable,
        },
        "os": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "cpu": {
            "processor": platform.processor(),
            "count": os.cpu_count(),
        },
        "tessera": _version("tessera-components"),
        "jinja2": _version("jinja2"),
        "markupsafe": _version("markupsafe"),
    }


@pytest.fixture(scope="session", autouse=True)
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    metadata = collect_environment_metadata()
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


@pytest.fixture(scope="session")
def jinja2_env() -> Jinja2Environment:
    """Host environment holding the partials components are compared against."""
    loader = Jinja2FileSystemLoader(str(TEMPLATE_DIR))
    return Jinja2Environment(loader=loader, autoescape=True, auto_reload=False)


@pytest.fixture
def view(jinja2_env: Jinja2Environment) -> ViewContext:
    return ViewContext(TestController(), environment=jinja2_env)
