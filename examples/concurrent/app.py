"""Concurrent rendering -- one component class, 8 threads.

A component class compiles once; every thread then renders its own
instances through its own view context. The current component is tracked
with a ContextVar, so simultaneous renders never see each other's state.

Run:
    python app.py
"""

from concurrent.futures import ThreadPoolExecutor

from tessera import Component, ViewContext, get_current_component


class ArticleComponent(Component):
    inline_template = """\
<article id="page-{{ page_id }}" data-rendering="{{ current().page_id }}">
  <h1>{{ title }}</h1>
  <ul>
  {% for tag in tags %}
    <li>{{ tag }}</li>
  {% endfor %}
  </ul>
</article>"""

    def __init__(self, page_id: int, title: str, tags: list[str]):
        self.page_id = page_id
        self.title = title
        self.tags = tags


pages = [
    {"page_id": i, "title": f"Page {i}", "tags": [f"tag-{i}-a", f"tag-{i}-b", f"tag-{i}-c"]}
    for i in range(8)
]


def render_page(page: dict) -> str:
    """Render a single page -- called from a worker thread."""
    view = ViewContext(helpers={"current": get_current_component})
    return str(view.render(ArticleComponent(**page)))


with ThreadPoolExecutor(max_workers=8) as pool:
    results = list(pool.map(render_page, pages))

output = "\n".join(results)


def main() -> None:
    print(f"Rendered {len(results)} pages across 8 threads:\n")
    for i, html in enumerate(results):
        print(f"--- Thread {i} ---")
        print(html)
        print()


if __name__ == "__main__":
    main()
