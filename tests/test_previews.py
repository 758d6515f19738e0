"""Tests for component previews and the preview renderer."""

import pytest
from components.card_component import CardComponent
from components.tabs_component import TabsComponent

from tessera import (
    Preview,
    PreviewNotFoundError,
    PreviewsDisabledError,
    configure,
    render_preview,
)
from tessera.preview import load_previews


@pytest.fixture
def previews(clean_previews, previews_dir):
    configure(preview_paths=[str(previews_dir)])


class TestLoading:
    def test_load_previews_imports_preview_files(self, previews) -> None:
        assert load_previews() == [
            "tessera_previews.card_component_preview",
            "tessera_previews.tabs_component_preview",
        ]

    def test_all_loads_on_demand(self, previews) -> None:
        names = sorted(p.preview_name() for p in Preview.all())
        assert names == ["card_component", "tabs_component"]

    def test_missing_preview_path(self, clean_previews, tmp_path) -> None:
        configure(preview_paths=[str(tmp_path / "nowhere")])
        assert load_previews() == []
        assert Preview.all() == []

    def test_find_and_exists(self, previews) -> None:
        assert Preview.find("card_component").__name__ == "CardComponentPreview"
        assert Preview.exists("tabs_component")
        assert not Preview.exists("missing")

    def test_redefining_a_preview_replaces_it(self, clean_previews) -> None:
        def define():
            class RepeatedPreview(Preview):
                def default(self):
                    return self.render(CardComponent(title="x"))

            return RepeatedPreview

        define()
        latest = define()
        assert Preview.all() == [latest]


class TestIntrospection:
    def test_examples(self, previews) -> None:
        preview = Preview.find("card_component")
        assert preview.examples() == ["default", "in_a_page", "with_markup", "with_title"]

    def test_component(self, previews) -> None:
        assert Preview.find("card_component").component() is CardComponent
        assert Preview.find("tabs_component").component() is TabsComponent

    def test_component_found_outside_module(self, clean_previews) -> None:
        class BadgeComponentPreview(Preview):
            pass

        from components.badge_component import BadgeComponent

        assert BadgeComponentPreview.component() is BadgeComponent

    def test_previews_of_component(self, previews) -> None:
        assert [p.__name__ for p in CardComponent.previews()] == ["CardComponentPreview"]

    def test_preview_source(self, previews) -> None:
        source = Preview.find("card_component").preview_source("default")
        assert source.startswith("def default(self):")
        assert 'CardComponent(title="Hello")' in source

    def test_layout(self, previews) -> None:
        assert Preview.find("tabs_component").layout_name() is False
        assert Preview.find("card_component").layout_name() is None

    def test_example_template_path(self, previews) -> None:
        preview = Preview.find("card_component")
        assert preview.preview_example_template_path("in_a_page") == "card_component/in_a_page.html.jinja"
        assert preview.preview_example_template_path("default") is None

    def test_render_args(self, previews) -> None:
        args = Preview.find("card_component").render_args("with_title", params={"title": "P", "bogus": 1})
        assert args["component"].title == "P"
        assert args["layout"] is None

    def test_unknown_example(self, previews) -> None:
        with pytest.raises(PreviewNotFoundError, match="Preview example 'missing' not found"):
            Preview.find("card_component").render_args("missing")


class TestRenderPreview:
    def test_default_example(self, previews, view) -> None:
        html = render_preview(view, "card_component", "default")
        assert html == '<div class="card "><h2>Hello</h2><div class="card-body">Body</div></div>'

    def test_params(self, previews, view) -> None:
        html = render_preview(view, "card_component", "with_title", params={"title": "From query"})
        assert "<h2>From query</h2>" in html

    def test_markup_block(self, previews, view) -> None:
        assert "<em>rich</em>" in render_preview(view, "card_component", "with_markup")

    def test_slots(self, previews, view) -> None:
        html = render_preview(view, "tabs_component", "with_tabs")
        assert '<section title="One">first</section><section title="Two">second</section>' in html

    def test_example_template(self, previews, view) -> None:
        assert render_preview(view, "card_component", "in_a_page") == "<article>Page</article>"

    def test_explicit_template(self, previews, view) -> None:
        assert render_preview(view, "tabs_component", "partial") == "<p>from a partial</p>"

    def test_default_layout(self, previews, view) -> None:
        configure(default_preview_layout="preview_layout.html")
        html = render_preview(view, "card_component", "default")
        assert html.startswith('<div class="preview"><div class="card ">')

    def test_layout_disabled_on_preview(self, previews, view) -> None:
        configure(default_preview_layout="preview_layout.html")
        html = render_preview(view, "tabs_component", "with_tabs")
        assert not html.startswith('<div class="preview">')

    def test_unknown_preview(self, previews, view) -> None:
        with pytest.raises(PreviewNotFoundError, match="Component preview 'missing' does not exist."):
            render_preview(view, "missing", "default")

    def test_previews_disabled(self, previews, view) -> None:
        configure(show_previews=False)
        with pytest.raises(PreviewsDisabledError):
            render_preview(view, "card_component", "default")


class TestPreviewSettings:
    def test_settings_follow_config(self) -> None:
        configure(
            show_previews=False,
            preview_paths=["previews/"],
            preview_route="/_components",
            default_preview_layout="preview.html",
        )
        assert CardComponent.show_previews() is False
        assert CardComponent.preview_paths() == ["previews/"]
        assert CardComponent.preview_route() == "/_components"
        assert CardComponent.default_preview_layout() == "preview.html"
