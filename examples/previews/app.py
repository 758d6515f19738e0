"""Component previews -- example renders for manual QA.

A preview class lists examples of one component. A host application
mounts `render_preview()` under its preview route; here the examples are
rendered directly, each wrapped in the configured preview layout.

Run:
    python app.py
"""

from pathlib import Path

import jinja2

from tessera import Component, Preview, ViewContext, configure, render_preview

HERE = Path(__file__).parent

configure(
    preview_paths=[str(HERE / "previews")],
    default_preview_layout="preview_layout.html",
)


class ButtonComponent(Component):
    def __init__(self, label: str, kind: str = "primary"):
        self.label = label
        self.kind = kind


class ButtonComponentPreview(Preview):
    def default(self):
        return self.render(ButtonComponent(label="Save"))

    def danger(self, label: str = "Delete"):
        return self.render(ButtonComponent(label=label, kind="danger"))

    def in_a_form(self):
        return self.render_with_template(locals={"button": ButtonComponent(label="Submit")})


# Host templates: the preview layout plus per-example templates
env = jinja2.Environment(
    loader=jinja2.FileSystemLoader([str(HERE / "templates"), str(HERE / "previews")]),
    autoescape=True,
)
view = ViewContext(environment=env)

index = {ButtonComponentPreview.preview_name(): ButtonComponentPreview.examples()}

output = render_preview(view, "button_component", "default")
danger = render_preview(view, "button_component", "danger", params={"label": "Remove"})
form = render_preview(view, "button_component", "in_a_form")


def main() -> None:
    for name, examples in index.items():
        print(f"{name}: {', '.join(examples)}")
    print()
    for html in (output, danger, form):
        print(html)


if __name__ == "__main__":
    main()
