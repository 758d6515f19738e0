"""Tests for ViewContext, ViewFlow and block calling."""

import asyncio
import threading

import jinja2
import pytest
from components.card_component import CardComponent
from markupsafe import Markup

from tessera import (
    Component,
    LookupContext,
    ViewContext,
    ViewFlow,
    current_component,
    get_current_component,
)
from tessera.testing import TestController
from tessera.view_context import call_block


class TestCallBlock:
    """Blocks get as many arguments as they accept."""

    def test_no_arguments(self) -> None:
        assert call_block(lambda: "x", ("ignored",)) == "x"

    def test_one_argument(self) -> None:
        assert call_block(lambda a: a, ("first", "second")) == "first"

    def test_varargs(self) -> None:
        assert call_block(lambda *args: args, (1, 2)) == (1, 2)

    def test_keyword_only_parameters_are_not_filled(self) -> None:
        assert call_block(lambda a, *, b="kw": (a, b), (1, 2)) == (1, "kw")

    def test_builtin_without_signature(self) -> None:
        assert call_block(str, ("value",)) == "value"

    def test_jinja_caller_macro(self) -> None:
        env = jinja2.Environment(autoescape=True)
        template = env.from_string("{% call capture() %}inside{% endcall %}")
        captured = []

        def capture(caller):
            captured.append(call_block(caller, ("component",)))
            return ""

        template.render(capture=capture)
        assert captured == [Markup("inside")]


class TestCapture:
    def test_none_block(self) -> None:
        assert ViewContext().capture(None) == Markup("")

    def test_escapes_text(self) -> None:
        assert ViewContext().capture(lambda: "<b>") == "&lt;b&gt;"

    def test_keeps_markup(self) -> None:
        assert ViewContext().capture(lambda: Markup("<b>")) == "<b>"

    def test_none_result(self) -> None:
        assert ViewContext().capture(lambda: None) == ""

    def test_non_text_results_are_empty(self) -> None:
        assert ViewContext().capture(lambda: (None, None)) == ""
        assert ViewContext().capture(lambda: 42) == ""
        assert ViewContext().capture(lambda: ["a"]) == ""

    def test_renders_components(self, view) -> None:
        html = view.capture(lambda: CardComponent(title="Nested"))
        assert "<h2>Nested</h2>" in html

    def test_passes_arguments(self) -> None:
        assert ViewContext().capture(lambda a, b: f"{a}-{b}", 1, 2) == "1-2"


class TestRender:
    def test_renders_template_name(self, view) -> None:
        assert view.render("partial.html", message="hi") == "<p>hi</p>"

    def test_template_without_environment(self) -> None:
        with pytest.raises(jinja2.TemplateNotFound):
            ViewContext().render("partial.html")

    def test_rejects_other_objects(self, view) -> None:
        with pytest.raises(TypeError, match="Cannot render"):
            view.render(42)

    def test_caller_used_when_no_block(self, view) -> None:
        html = view.render(CardComponent(title="Hi"), caller=lambda: "from caller")
        assert "from caller" in html

    def test_plain_string_from_render_in_is_escaped(self, view) -> None:
        class RawRenderable:
            def render_in(self, view_context, block=None):
                return "<i>raw</i>"

        assert view.render(RawRenderable()) == "&lt;i&gt;raw&lt;/i&gt;"

    def test_view_renderer_is_self(self, view) -> None:
        assert view.view_renderer is view


class TestHelpers:
    def test_helper_attribute_lookup(self) -> None:
        view = ViewContext(helpers={"shout": lambda s: s.upper()})
        assert view.shout("hi") == "HI"

    def test_add_helper(self) -> None:
        view = ViewContext()
        view.add_helper("answer", lambda: 42)
        assert view.answer() == 42
        assert view.helper_functions() == {"answer": view.answer}

    def test_unknown_attribute(self) -> None:
        with pytest.raises(AttributeError, match="no attribute or helper 'missing'"):
            ViewContext().missing

    def test_helpers_in_host_templates(self, host_env) -> None:
        host_env.loader.mapping["helper.html"] = "{{ shout('hi') }}"
        view = ViewContext(environment=host_env, helpers={"shout": lambda s: s.upper()})
        assert view.render("helper.html") == "HI"

    def test_request_and_config(self) -> None:
        controller = TestController()
        view = ViewContext(controller)
        assert view.request is controller.request
        assert view.config == {}
        assert ViewContext().request is None
        assert ViewContext().config == {}


class TestContentFor:
    def test_append_and_read(self, view) -> None:
        view.content_for("head", Markup("<meta>"))
        view.content_for("head", block=lambda: "<title>")
        assert view.content_for("head") == "<meta>&lt;title&gt;"
        assert view.has_content_for("head")

    def test_read_missing(self, view) -> None:
        assert view.content_for("missing") == ""
        assert not view.has_content_for("missing")

    def test_view_flow(self) -> None:
        flow = ViewFlow()
        flow.set("a", "<x>")
        flow.append("a", Markup("<y>"))
        assert flow.get("a") == "&lt;x&gt;<y>"
        assert "a" in flow
        assert flow.keys() == ["a"]


class TestCsrf:
    def test_token_from_controller(self) -> None:
        controller = TestController()
        view = ViewContext(controller)
        assert view.form_authenticity_token() == controller.form_authenticity_token()
        assert view.protect_against_forgery() is True

    def test_protection_disabled(self) -> None:
        view = ViewContext(TestController(protect_against_forgery=False))
        assert view.protect_against_forgery() is False

    def test_without_controller(self) -> None:
        assert ViewContext().form_authenticity_token() is None
        assert ViewContext().protect_against_forgery() is False


class TestLookupContext:
    def test_defaults(self) -> None:
        lookup = LookupContext()
        assert lookup.variants == []
        assert lookup.formats == ["html"]


class TestCurrentComponent:
    """The current component is isolated per thread and per task."""

    def test_context_manager(self) -> None:
        marker = object()
        with current_component(marker):
            assert get_current_component() is marker
        assert get_current_component() is None

    def test_threads_render_concurrently(self) -> None:
        class ThreadNameComponent(Component):
            inline_template = "{{ name }}:{{ current().name }}"

            def __init__(self, name):
                self.name = name

        results: dict[int, str] = {}

        def worker(i: int) -> None:
            view = ViewContext(helpers={"current": get_current_component})
            results[i] = str(view.render(ThreadNameComponent(f"t{i}")))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == {i: f"t{i}:t{i}" for i in range(8)}

    def test_asyncio_tasks_render_independently(self) -> None:
        async def render(name: str) -> str:
            await asyncio.sleep(0)
            return str(ViewContext().render(CardComponent(title=name)))

        async def main() -> list[str]:
            return await asyncio.gather(*(render(f"card{i}") for i in range(5)))

        results = asyncio.run(main())
        assert [f"<h2>card{i}</h2>" in html for i, html in enumerate(results)] == [True] * 5
