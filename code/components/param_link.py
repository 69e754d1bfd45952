"""Link component that carries search params over to its target."""

import html
from typing import TYPE_CHECKING, Any, Mapping, Optional

import panel as pn

from .base import BaseComponent

if TYPE_CHECKING:
    from core.context import ParamContext


class ParamLink(BaseComponent):
    """
    Anchor whose ``href`` keeps the current search params.

    Linking to the current path keeps every parameter, linking elsewhere
    keeps only the context's ``keep`` list; ``params`` are applied on top.
    """

    def __init__(
        self,
        context: "ParamContext",
        text: str,
        to: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
        css_classes: Optional[list] = None,
    ):
        """
        Initialize the link.

        Args:
            context: Shared search-param state
            text: Link text
            to: Target path, defaults to the current path
            params: Parameters to set (or remove, with None) on the target
            css_classes: CSS classes of the anchor
        """
        super().__init__(context)
        self.text = text
        self.to = to
        self.params = dict(params or {})
        self.css_classes = css_classes or []

    @property
    def href(self) -> str:
        return self.context.url_for(self.to, self.params)

    def render_html(self) -> str:
        class_attr = ""
        if self.css_classes:
            class_attr = f' class="{html.escape(" ".join(self.css_classes))}"'
        return f'<a href="{html.escape(self.href)}"{class_attr}>{html.escape(self.text)}</a>'

    def _render(self, location) -> pn.pane.HTML:
        return pn.pane.HTML(self.render_html())

    def create(self) -> pn.viewable.Viewable:
        """
        Create an HTML pane re-rendered on every navigation.

        Returns:
            A Panel binding rendering the anchor
        """
        return pn.bind(self._render, location=self.context.param.location)  # type: ignore[return-value]
