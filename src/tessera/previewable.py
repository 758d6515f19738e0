"""Preview settings on components and the preview renderer.

Settings live in `tessera.config.Config` and are exposed on every
component class:

    >>> CardComponent.show_previews()
    True
    >>> CardComponent.preview_paths()
    ['previews/']

`render_preview()` is what a host's preview route calls:

    html = render_preview(view, "card_component", "default", params=request.query)

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from tessera.config import get_config
from tessera.exceptions import PreviewNotFoundError, PreviewsDisabledError
from tessera.preview import Preview

if TYPE_CHECKING:
    from tessera.view_context import ViewContext


class Previewable:
    """Mixin exposing preview configuration on component classes."""

    @classmethod
    def show_previews(cls) -> bool:
        return get_config().show_previews

    @classmethod
    def preview_paths(cls) -> list[str]:
        return list(get_config().preview_paths)

    @classmethod
    def preview_route(cls) -> str:
        return get_config().preview_route

    @classmethod
    def default_preview_layout(cls) -> str | None:
        return get_config().default_preview_layout

    @classmethod
    def previews(cls) -> list[type[Preview]]:
        """Preview classes whose component is this class."""
        return [p for p in Preview.all() if p.component() is cls]


def render_preview(
    view_context: ViewContext,
    preview_name: str,
    example: str,
    params: dict[str, Any] | None = None,
) -> Markup:
    """Render one preview example, wrapped in its layout.

    The example's component is rendered through ``view_context`` (or its
    template, for ``render_with_template`` examples). When a layout is set
    on the preview, or a default preview layout is configured, the result
    is passed to that host template as ``content``.

    Raises:
        PreviewsDisabledError: ``show_previews`` is off
        PreviewNotFoundError: Unknown preview or example
    """
    config = get_config()
    if not config.show_previews:
        raise PreviewsDisabledError("Component previews are disabled (show_previews is False).")

    preview = Preview.find(preview_name)
    if preview is None:
        raise PreviewNotFoundError(f"Component preview '{preview_name}' does not exist.")

    render_args = preview.render_args(example, params=params)

    if "component" in render_args:
        html = view_context.render(
            render_args["component"], render_args.get("block"), **render_args.get("args", {})
        )
    else:
        template = render_args.get("template") or preview.preview_example_template_path(example)
        if template is None:
            raise PreviewNotFoundError(
                f"No template found for preview example '{preview_name}/{example}'."
            )
        html = view_context.render_template(template, **render_args.get("locals", {}))

    layout = render_args.get("layout")
    if layout is None:
        layout = config.default_preview_layout
    if not layout:
        return html
    return view_context.render_template(
        layout, content=html, preview=preview, example=example
    )
