"""Slot registration and resolution for components.

Slots are named insertion points a component declares up front and the
caller fills from the render block:

    class TabsComponent(Component):
        pass

    TabsComponent.with_slot("header")
    TabsComponent.with_slot("tab", collection=True, class_name="Tab")

    view.render(TabsComponent(), lambda c: (
        c.slot("header", block=lambda: "Settings"),
        c.slot("tab", title="General", block=lambda: "..."),
        c.slot("tab", title="Advanced", block=lambda: "..."),
    ))

The tuple the block returns is not content: only strings and markup are.

Template:
    <h2>{{ header.content }}</h2>
    {% for tab in tabs %}<section title="{{ tab.title }}">{{ tab.content }}</section>{% endfor %}

Single slots are read through their name and hold a `Slot` (or None).
Collection slots are read through the pluralized name and hold a list.

Each subclass gets its own copy of ``slots`` when it is created, so
declaring a slot on one component never leaks into its parent or
siblings.

"""

from __future__ import annotations

import importlib
import sys
from typing import Any, ClassVar

from markupsafe import Markup

from tessera.exceptions import (
    DuplicateSlotError,
    InvalidSlotClassError,
    ReservedNameError,
    UnknownSlotError,
)
from tessera.slot import Slot
from tessera.utils.inflection import pluralize


def _slot_accessor(storage: str, collection: bool) -> property:
    def write_slot(self: Any, value: Any) -> None:
        self.__dict__[storage] = value

    if collection:

        def read_collection(self: Any) -> list[Slot]:
            return self.__dict__.setdefault(storage, [])

        return property(read_collection, write_slot)

    def read_single(self: Any) -> Slot | None:
        return self.__dict__.get(storage)

    return property(read_single, write_slot)



class Slotable:
    """Mixin adding ``with_slot`` / ``slot`` to components."""

    # slot name -> {"class_name", "accessor_name", "storage", "collection"}
    slots: ClassVar[dict[str, dict[str, Any]]] = {}

    @classmethod
    def with_slot(
        cls,
        *slot_names: str,
        collection: bool = False,
        class_name: str | type[Slot] | None = None,
    ) -> None:
        """Declare one or more slots.

        Args:
            *slot_names: Slot names
            collection: Accept repeated registrations, read as a list through
                the pluralized name (``tab`` -> ``tabs``)
            class_name: `Slot` subclass, or the name of one nested in the
                component or defined in its module (default: `Slot`)

        Raises:
            DuplicateSlotError: A name is already declared
            ReservedNameError: A name is ``content``
        """
        for slot_name in slot_names:
            if slot_name in cls.slots:
                raise DuplicateSlotError(
                    f"{slot_name} slot declared multiple times",
                    component=cls.__name__,
                )
            if slot_name == "content":
                raise ReservedNameError(
                    "content is a reserved slot name. Please use another name, such as 'body'",
                    component=cls.__name__,
                )

            accessor_name = pluralize(slot_name) if collection else slot_name
            storage = f"_slot_{accessor_name}"
            setattr(cls, accessor_name, _slot_accessor(storage, collection))

            cls.slots[slot_name] = {
                "class_name": class_name if class_name is not None else "Slot",
                "accessor_name": accessor_name,
                "storage": storage,
                "collection": collection,
            }

    def slot(self, slot_name: str, block: Any = None, **kwargs: Any) -> None:
        """Register content for a declared slot.

        Args:
            slot_name: Declared slot name
            block: Content block captured through the view context
            **kwargs: Arguments for the slot class initializer

        Raises:
            UnknownSlotError: ``slot_name`` was not declared
            InvalidSlotClassError: The slot class is not a `Slot` subclass
        """
        slots = type(self).slots
        if slot_name not in slots:
            raise UnknownSlotError(
                f"Unknown slot '{slot_name}' - expected one of '{tuple(slots)}'",
                component=type(self).__name__,
            )

        definition = slots[slot_name]
        slot_class = self._resolve_slot_class(definition["class_name"])
        if not (isinstance(slot_class, type) and issubclass(slot_class, Slot)):
            raise InvalidSlotClassError(
                f"{getattr(slot_class, '__name__', slot_class)} must inherit from tessera.Slot",
                component=type(self).__name__,
            )

        slot_instance = slot_class(**kwargs) if kwargs else slot_class()
        if block is not None:
            captured = self.helpers.capture(block)
            slot_instance.content = Markup(captured.strip())

        if definition["collection"]:
            self.__dict__.setdefault(definition["storage"], []).append(slot_instance)
        else:
            self.__dict__[definition["storage"]] = slot_instance
        return None

    def slot_values(self) -> dict[str, Any]:
        """Accessor name -> registered slot(s), for template contexts."""
        return {
            definition["accessor_name"]: getattr(self, definition["accessor_name"])
            for definition in type(self).slots.values()
        }

    @classmethod
    def _resolve_slot_class(cls, class_name: str | type) -> Any:
        if isinstance(class_name, type):
            return class_name
        if class_name == "Slot":
            return Slot

        nested = getattr(cls, class_name, None)
        if nested is not None:
            return nested

        module = sys.modules.get(cls.__module__)
        if module is not None and hasattr(module, class_name):
            return getattr(module, class_name)

        if "." in class_name:
            module_name, _, attr = class_name.rpartition(".")
            try:
                return getattr(importlib.import_module(module_name), attr)
            except (ImportError, AttributeError):
                pass

        raise InvalidSlotClassError(
            f"Slot class '{class_name}' not found for {cls.__name__}",
            component=cls.__name__,
        )
