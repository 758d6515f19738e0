"""Hello World -- the simplest tessera example.

A component with an inline template, rendered through a view context.
No template files needed.

Run:
    python app.py
"""

from tessera import Component, ViewContext


class GreetingComponent(Component):
    inline_template = "<p>Hello, {{ name }}!{% if content %} {{ content }}{% endif %}</p>"

    def __init__(self, name: str):
        self.name = name


view = ViewContext()

# Render with an instance
output = view.render(GreetingComponent(name="World"))


def main() -> None:
    print(output)
    print()

    # Render the same class with different data and content
    for name in ["Tessera", "Jinja", "Python"]:
        print(view.render(GreetingComponent(name=name), "Welcome."))


if __name__ == "__main__":
    main()
