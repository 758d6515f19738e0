"""Tests for tessera.testing."""

import pytest
from components.card_component import CardComponent
from components.product_component import ProductComponent

from tessera import Component, configure
from tessera.testing import (
    TestController,
    TestRequest,
    build_view_context,
    render_inline,
    render_preview,
    rendered_component,
    with_variant,
)


class CustomController:
    def __init__(self):
        self.request = TestRequest(path="/custom")


class TestRenderInline:
    def test_renders_component(self) -> None:
        html = render_inline(CardComponent(title="Hi"), "Body")
        assert html == '<div class="card "><h2>Hi</h2><div class="card-body">Body</div></div>'

    def test_rendered_component(self) -> None:
        html = render_inline(CardComponent(title="Last"))
        assert rendered_component() == html

    def test_renders_collection(self) -> None:
        html = render_inline(ProductComponent.with_collection([{"name": "Radio"}]))
        assert html == '<li class="product">1. Radio</li>'

    def test_custom_view_context(self, phone_view) -> None:
        assert "card--phone" in render_inline(CardComponent(title="Hi"), view_context=phone_view)


class TestWithVariant:
    def test_variant_applies_inside_block(self) -> None:
        with with_variant("phone") as variant:
            assert variant == "phone"
            assert "card--phone" in render_inline(CardComponent(title="Hi"))
        assert "card--phone" not in render_inline(CardComponent(title="Hi"))

    def test_build_view_context_variants(self) -> None:
        assert build_view_context().lookup_context.variants == []
        with with_variant("tablet"):
            assert build_view_context().lookup_context.variants == ["tablet"]


class TestControllers:
    def test_default_controller(self) -> None:
        view = build_view_context()
        assert isinstance(view.controller, TestController)
        assert view.request.path == "/"
        assert view.protect_against_forgery() is True

    def test_tokens_differ_between_controllers(self) -> None:
        assert TestController().form_authenticity_token() != TestController().form_authenticity_token()

    def test_configured_controller(self) -> None:
        configure(test_controller=f"{__name__}.CustomController")

        class PathComponent(Component):
            inline_template = "{{ self.request.path }}"

        assert render_inline(PathComponent()) == "/custom"

    def test_invalid_controller_path(self) -> None:
        configure(test_controller="NoDots")
        with pytest.raises(ImportError, match="dotted path"):
            build_view_context()

    def test_explicit_controller(self) -> None:
        controller = TestController(TestRequest(path="/explicit"))
        assert build_view_context(controller=controller).request.path == "/explicit"


class TestRenderPreviewHelper:
    def test_render_preview(self, clean_previews, previews_dir) -> None:
        configure(preview_paths=[str(previews_dir)])
        html = render_preview("card_component", "with_title", {"title": "Helper"})
        assert "<h2>Helper</h2>" in html
        assert rendered_component() == html
