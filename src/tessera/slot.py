"""Slot value objects.

A `Slot` instance is created for every ``component.slot(name, ...)``
call and stored on the component for its template to read. Subclass it
to give a slot arguments and behavior:

    class CardComponent(Component):
        class Header(Slot):
            def __init__(self, classes: str = ""):
                self.classes = classes

    CardComponent.with_slot("header", class_name="Header")

Template:
    <div class="{{ header.classes }}">{{ header.content }}</div>
"""

from __future__ import annotations

from markupsafe import Markup


class Slot:
    """Captured content for one slot registration.

    Attributes:
        content: Captured block markup, or None when no block was given
    """

    content: Markup | None = None

    def __html__(self) -> Markup:
        return self.content if self.content is not None else Markup("")

    def __str__(self) -> str:
        return str(self.__html__())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} content={self.content!r}>"
