"""Process-wide registry of compiled component classes.

Compilation happens once per class and the result is shared by every
request. `CompileCache` records which classes are compiled so tooling
(development reload, test isolation) can invalidate them all at once.

Thread-Safety:
Registration and invalidation hold a lock; lookups read a set.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from typing import Any, ClassVar

logger = logging.getLogger(__name__)


class CompileCache:
    """Set of component classes whose templates are compiled."""

    _cache: ClassVar[set[type]] = set()
    _lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def register(cls, component_class: type) -> None:
        with cls._lock:
            cls._cache.add(component_class)

    @classmethod
    def is_compiled(cls, component_class: type) -> bool:
        return component_class in cls._cache

    @classmethod
    def invalidate(cls) -> None:
        """Forget every compiled class so the next render recompiles it."""
        with cls._lock:
            classes = list(cls._cache)
            cls._cache.clear()
        for component_class in classes:
            compiler: Any = component_class.__dict__.get("_template_compiler")
            if compiler is not None:
                compiler.reset()
        logger.info("Invalidated %d compiled component(s)", len(classes))

    @classmethod
    def invalidate_class(cls, component_class: type) -> None:
        with cls._lock:
            cls._cache.discard(component_class)

    @classmethod
    def size(cls) -> int:
        return len(cls._cache)

    @classmethod
    def compiled_classes(cls) -> Iterator[type]:
        """Iterate over a snapshot of the compiled classes."""
        return iter(list(cls._cache))
