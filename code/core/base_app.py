"""
Base application class wiring a Panel app to the search-param engine.

This module provides the foundational patterns for building Panel apps with:
- A shared ParamContext holding URL state
- Two-way widget / URL synchronization
- Keep-aware navigation links
- Template layout helpers
"""

import logging
from typing import Any, Dict, List, Optional

import panel as pn
import param

from components import ParamLink, WidgetBinding, sync_widgets
from config import DEFAULT_CONFIG, AppConfig

from .context import ParamContext
from .history import Location

logger = logging.getLogger(__name__)


class BaseApp(param.Parameterized):
    """
    Base class for Panel apps whose state lives in the URL.

    Provides common functionality:
    - ParamContext shared by every component
    - URL state synchronization helpers
    - Navigation links between pages
    - Template layout helpers

    Subclasses should:
    1. Override `create_main_content()` to build the UI
    2. Optionally override `create_sidebar()`
    """

    config = param.ClassSelector(class_=AppConfig, default=None, doc="App configuration")

    def __init__(self, history: Any = None, timers: Any = None, **params):
        super().__init__(**params)
        if self.config is None:
            self.config = DEFAULT_CONFIG
        self.context = ParamContext.from_config(self.config.sync, history=history, timers=timers)
        self._components: Dict[str, Any] = {}
        self._bindings: List[WidgetBinding] = []

    def sync_url_state(self, widgets_mapping: Dict[Any, tuple]) -> None:
        """
        Sync widget values with URL query parameters.

        Args:
            widgets_mapping: Dict mapping widget to (url_param_name, default)
                e.g., {widget: ("my_param", "")}
        """
        self._bindings.extend(sync_widgets(self.context, widgets_mapping))

    def create_navigation(self) -> pn.Column:
        """Create one link per configured page."""
        links = [
            ParamLink(self.context, title, to=path).create()
            for path, title in self.config.pages
        ]
        return pn.Column(pn.pane.Markdown("### Pages"), *links)

    def create_main_content(self) -> pn.viewable.Viewable:
        """
        Create the main content layout. Override in subclass.

        Returns:
            Panel viewable object
        """
        raise NotImplementedError("Subclass must implement create_main_content()")

    def create_sidebar(self) -> list:
        """
        Create sidebar content. Override to customize.

        Returns:
            List of Panel objects for sidebar
        """
        return [
            self.create_navigation(),
            pn.pane.Markdown("### URL State"),
            pn.bind(self._render_state, location=self.context.param.location),
        ]

    def _render_state(self, location: Optional[Location]) -> pn.pane.Markdown:
        entries = self.context.search_params().entries()
        if not entries:
            return pn.pane.Markdown("No parameters", css_classes=["alert", "alert-secondary", "p-2"])
        lines = "\n".join(f"- `{name}` = `{value}`" for name, value in entries)
        return pn.pane.Markdown(lines, css_classes=["alert", "alert-info", "p-2"])

    def close(self) -> None:
        """Stop syncing widgets and tear down the context."""
        for binding in self._bindings:
            binding.unlink()
        self._bindings = []
        self.context.close()

    def main_layout(
        self,
        header_background: str = "#0072B5",
    ) -> pn.template.BootstrapTemplate:
        """
        Construct the full application layout.

        Args:
            header_background: Header background color

        Returns:
            BootstrapTemplate ready to serve
        """
        main_content = self.create_main_content()

        template = pn.template.BootstrapTemplate(
            title=self.config.app_title,
            header_background=header_background,
            main=[main_content],
            sidebar=self.create_sidebar(),
            theme="default",
        )
        template.sidebar_width = 260

        if pn.state.curdoc is not None:
            # Pending commits must not outlive the session
            pn.state.on_session_destroyed(lambda session_context: self.close())

        return template
