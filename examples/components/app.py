"""Reusable components -- sidecar templates, slots and content areas.

Each component class has a template next to this file named after the
class (``card_component.html.jinja``). The card fills its header slot and
body from the render block; the page uses content areas.

Run:
    python app.py
"""

from markupsafe import Markup

from tessera import Component, Slot, ViewContext


class AlertComponent(Component):
    def __init__(self, level: str = "info"):
        self.level = level


class CardComponent(Component):
    class Header(Slot):
        def __init__(self, icon: str = ""):
            self.icon = icon


CardComponent.with_slot("header", class_name="Header")


class PageComponent(Component):
    def __init__(self, title: str):
        self.title = title


PageComponent.with_content_areas("sidebar", "body")


features = [
    {"name": "Sidecar templates", "desc": "One template file per component"},
    {"name": "Slots", "desc": "Named insertion points filled by the caller"},
    {"name": "Variants", "desc": "Per-device templates"},
]

view = ViewContext()


def card(feature: dict) -> Markup:
    def fill(card: CardComponent):
        card.slot("header", icon="*", block=lambda: feature["name"])
        return feature["desc"]

    return view.render(CardComponent(), fill)


def page(component: PageComponent) -> None:
    component.with_area("sidebar", block=lambda: AlertComponent(level="warning"))
    component.with_area("body", Markup("").join(card(f) for f in features))


output = view.render(PageComponent(title="Component Demo"), page)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
