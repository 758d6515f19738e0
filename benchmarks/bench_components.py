"""Components rendered by the benchmarks."""

from __future__ import annotations

from tessera import Component, Slot


class NameComponent(Component):
    inline_template = "<h1>hello {{ name }}</h1>"

    def __init__(self, name: str):
        self.name = name


class SlotComponent(Component):
    inline_template = (
        '<div class="{{ header.classes }}">{{ header.content }}</div>'
        "{% for item in items %}"
        '<p class="{{ item.classes }}">{{ item.content }}</p>'
        "{% endfor %}"
        "<footer>{{ name }}</footer>"
    )

    class Header(Slot):
        def __init__(self, classes: str = ""):
            self.classes = classes

    class Item(Slot):
        def __init__(self, classes: str = ""):
            self.classes = classes

    def __init__(self, name: str):
        self.name = name


SlotComponent.with_slot("header", class_name="Header")
SlotComponent.with_slot("item", collection=True, class_name="Item")


class RowComponent(Component):
    inline_template = "<tr><td>{{ row_counter }}</td><td>{{ row.name }}</td><td>{{ row.email }}</td></tr>"

    def __init__(self, row: dict, row_counter: int = 0):
        self.row = row
        self.row_counter = row_counter


def fill_slots(component: SlotComponent) -> None:
    component.slot("header", classes="my-header", block=lambda: "Hello world")
    component.slot("item", classes="a", block=lambda: "First item")
    component.slot("item", classes="b", block=lambda: "Second item")
