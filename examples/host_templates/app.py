"""Host templates -- components inside an existing Jinja2 application.

Pages stay ordinary Jinja2 templates. Components are rendered with the
``render`` helper; a ``{% call %}`` block becomes the component's content,
and ``content_for`` lets a component add tags to the layout's <head>.

Run:
    python app.py
"""

from pathlib import Path

import jinja2
from markupsafe import Markup

from tessera import Component, ViewContext
from tessera.testing import TestController

templates_dir = Path(__file__).parent / "templates"


class ModalComponent(Component):
    inline_template = (
        "{% do content_for('head', stylesheet) %}"
        '<dialog id="{{ modal_id }}"><h2>{{ title }}</h2>{{ content }}</dialog>'
    )

    def __init__(self, modal_id: str, title: str):
        self.modal_id = modal_id
        self.title = title

    def before_render(self) -> None:
        self.stylesheet = self.helpers.asset_tag("modal.css")


class CsrfFieldComponent(Component):
    inline_template = (
        '{% if self.protect_against_forgery() %}'
        '<input type="hidden" name="csrf_token" value="{{ self.form_authenticity_token() }}">'
        "{% endif %}"
    )


def asset_tag(name: str) -> Markup:
    return Markup('<link rel="stylesheet" href="/assets/{}">').format(name)


env = jinja2.Environment(loader=jinja2.FileSystemLoader(str(templates_dir)), autoescape=True)
env.globals.update(ModalComponent=ModalComponent, CsrfFieldComponent=CsrfFieldComponent)

controller = TestController()
view = ViewContext(controller, environment=env, helpers={"asset_tag": asset_tag})

body = view.render("confirm.html", item="Invoice #42")
output = view.render("layout.html", content=body)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
