"""Render a component once per item of a sequence.

    ProductComponent.with_collection(products, notice="Sale")

renders ``ProductComponent(product=item, notice="Sale")`` for each item.
The parameter name defaults to the snake-cased class name without its
``_component`` suffix and can be changed with
`Component.with_collection_parameter`. When the initializer also accepts
``<param>_counter`` it receives the 1-based position; ``<param>_iteration``
receives an `Iteration`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from tessera.exceptions import InvalidCollectionError

if TYPE_CHECKING:
    from tessera.base import Component
    from tessera.view_context import Block, ViewContext


@dataclass(frozen=True, slots=True)
class Iteration:
    """Position of the current item within a rendered collection.

    Attributes:
        index: 0-based position
        size: Number of items in the collection
    """

    index: int
    size: int

    @property
    def first(self) -> bool:
        return self.index == 0

    @property
    def last(self) -> bool:
        return self.index == self.size - 1


def _collection_items(collection: Any) -> list[Any]:
    if collection is None:
        return []
    if isinstance(collection, (str, bytes, Mapping)) or not isinstance(collection, Iterable):
        raise InvalidCollectionError(
            "The value of the argument isn't a valid collection. "
            f"Make sure it is a list or other sequence: {collection!r}"
        )
    return list(collection)


class Collection:
    """A component class bound to a sequence of items.

    Rendering compiles the component class, validates its collection
    parameter and renders one component per item.
    """

    __slots__ = ("_collection", "_component", "_options", "_variant")

    def __init__(self, component: type[Component], collection: Any, **options: Any):
        self._component = component
        self._collection = _collection_items(collection)
        self._options = options
        self._variant: str | None = None

    def __repr__(self) -> str:
        return f"<Collection {self._component.__name__} x{len(self._collection)}>"

    def __len__(self) -> int:
        return len(self._collection)

    @property
    def component(self) -> type[Component]:
        return self._component

    def with_variant(self, variant: str | None) -> Collection:
        """Render every item with ``variant``."""
        self._variant = variant
        return self

    def components(self) -> list[Component]:
        """Instantiate one component per item (without rendering)."""
        component = self._component
        component.compile(raise_errors=True)
        component.validate_collection_parameter(validate_default=True)

        size = len(self._collection)
        instances = []
        for index, item in enumerate(self._collection):
            instance = component(**self._component_options(item, Iteration(index, size)))
            if self._variant is not None:
                instance.with_variant(self._variant)
            instances.append(instance)
        return instances

    def render_in(self, view_context: ViewContext, block: Block | None = None) -> Markup:
        return Markup("").join(
            instance.render_in(view_context, block) for instance in self.components()
        )

    def _component_options(self, item: Any, iteration: Iteration) -> dict[str, Any]:
        component = self._component
        options = dict(self._options)
        options[component.collection_parameter()] = item
        if component.counter_argument_present():
            options[component.collection_counter_parameter()] = iteration.index + 1
        if component.iteration_argument_present():
            options[component.collection_iteration_parameter()] = iteration
        return options
