"""Load hooks: run setup code once a Tessera class is defined.

Integrations register callbacks with `on_load()` without importing the
class they configure. When `run_load_hooks()` fires for a name, every
pending callback runs with the loaded object; callbacks registered after
that run immediately.

Example:
    >>> from tessera.hooks import on_load
    >>> on_load("component", lambda base: base.with_content_areas.__doc__)

`tessera.base` fires ``"component"`` with the `Component` class.

"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

LoadHook = Callable[[Any], object]

_lock = threading.Lock()
_hooks: defaultdict[str, list[LoadHook]] = defaultdict(list)
_loaded: defaultdict[str, list[Any]] = defaultdict(list)


def on_load(name: str, hook: LoadHook) -> None:
    """Register ``hook`` to run with every object loaded under ``name``.

    Objects already loaded under ``name`` are passed to the hook right away.
    """
    with _lock:
        _hooks[name].append(hook)
        loaded = list(_loaded[name])
    for obj in loaded:
        hook(obj)


def run_load_hooks(name: str, obj: Any) -> None:
    """Record ``obj`` as loaded under ``name`` and run the registered hooks."""
    with _lock:
        _loaded[name].append(obj)
        hooks = list(_hooks[name])
    logger.debug("Running %d load hook(s) for %r", len(hooks), name)
    for hook in hooks:
        hook(obj)


def clear_load_hooks(name: str | None = None) -> None:
    """Forget registered hooks (all of them, or only those for ``name``).

    Loaded objects stay recorded, so hooks registered afterwards still see them.
    """
    with _lock:
        if name is None:
            _hooks.clear()
        else:
            _hooks.pop(name, None)
