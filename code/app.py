"""
URL Param Sync Explorer

A Panel app whose whole state lives in the URL query string: reload the
page or share the link and every widget comes back as it was.

To run:
    panel serve code/app.py --dev --show
"""

import logging
from typing import Any, Optional

import panel as pn

from components import ParamLink, bind_to_location, with_params
from config import AppConfig
from core.base_app import BaseApp
from core.history import Location

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize Panel extensions
pn.extension()

TAG_OPTIONS = ["alpha", "beta", "gamma", "delta"]
THEMES = ["light", "dark"]

# Defaults shared by every render, so setters keep their identity
NO_TAGS: list = []
NO_RANGE: dict = {}


@with_params(
    {
        "query": {"name": "q", "default": ""},
        "page": {"default": 1},
        "tags": {"default": NO_TAGS},
        "bounds": {"name": "range", "default": NO_RANGE},
    }
)
def render_summary(query, set_query, page, set_page, tags, set_tags, bounds, set_bounds):
    """Summary of the current search, with a reset button."""
    reset_button = pn.widgets.Button(name="Reset search", button_type="light", width=120)

    def reset(event):
        # Every setter below lands in the same history entry
        set_query("")
        set_page(1)
        set_tags(NO_TAGS)
        set_bounds(NO_RANGE)

    reset_button.on_click(reset)

    lines = [
        f"**Query:** `{query or '-'}`",
        f"**Page:** {page}",
        f"**Tags:** {', '.join(tags) if tags else '-'}",
        f"**Range:** {bounds.get('min', '-')} to {bounds.get('max', '-')}",
    ]
    return pn.Column(pn.pane.Markdown("  \n".join(lines)), reset_button)


class URLParamSyncApp(BaseApp):
    """
    Demo app for the search-param engine.

    Pages:
    - ``/``: search form (query, page, exact match, tags, value range)
    - ``/settings``: theme selection, kept when navigating between pages
    """

    def __init__(self, history: Any = None, timers: Any = None, **params):
        super().__init__(history=history, timers=timers, **params)

        self.query_input = pn.widgets.TextInput(name="Query", placeholder="Search...", width=300)
        self.page_slider = pn.widgets.IntSlider(name="Page", start=1, end=20, value=1, width=300)
        self.exact_checkbox = pn.widgets.Checkbox(name="Exact match", value=False)
        self.tags_select = pn.widgets.MultiChoice(name="Tags", options=TAG_OPTIONS, width=300)
        self.range_min = pn.widgets.IntInput(name="Min", value=0, width=140)
        self.range_max = pn.widgets.IntInput(name="Max", value=100, width=140)
        self.theme_select = pn.widgets.Select(name="Theme", options=THEMES, value=THEMES[0])

        self.sync_url_state(
            {
                self.query_input: ("q", ""),
                self.page_slider: ("page", 1),
                self.exact_checkbox: ("exact", False),
                self.tags_select: ("tags", NO_TAGS),
                self.theme_select: ("theme", THEMES[0]),
            }
        )

        # The range is a single dict param spread over "rangemin" / "rangemax"
        self._updating_range = False
        self._apply_range()
        self.range_min.param.watch(self._on_range_change, "value")
        self.range_max.param.watch(self._on_range_change, "value")

    def _apply_range(self) -> None:
        """Read the range from the URL into the inputs."""
        value, _ = self.context.search_params().param("range", NO_RANGE)
        self._updating_range = True
        try:
            if isinstance(value.get("min"), int):
                self.range_min.value = value["min"]
            if isinstance(value.get("max"), int):
                self.range_max.value = value["max"]
        finally:
            self._updating_range = False

    def _on_range_change(self, event) -> None:
        if self._updating_range:
            return
        _, set_range = self.context.search_params().param("range", NO_RANGE)
        set_range({"min": self.range_min.value, "max": self.range_max.value})
        logger.info(f"Range changed to {self.range_min.value}-{self.range_max.value}")

    def _render_page(self, location: Optional[Location]) -> pn.viewable.Viewable:
        pathname = location.pathname if location is not None else "/"
        if pathname == "/settings":
            return pn.Column(
                pn.pane.Markdown("## Settings"),
                self.theme_select,
                ParamLink(self.context, "Back to search", to="/").create(),
            )
        return pn.Column(
            pn.pane.Markdown("## Search"),
            self.query_input,
            self.page_slider,
            self.exact_checkbox,
            self.tags_select,
            pn.Row(self.range_min, self.range_max),
            ParamLink(self.context, "Next page", params={"page": self.page_slider.value + 1}).create(),
            bind_to_location(self.context, render_summary),
        )

    def create_main_content(self) -> pn.viewable.Viewable:
        """Render the page matching the current path."""
        return pn.bind(self._render_page, location=self.context.param.location)


def create_app(config: Optional[AppConfig] = None, history: Any = None, timers: Any = None) -> URLParamSyncApp:
    """Create the app; history and timers default to the current Panel session."""
    params = {"config": config} if config is not None else {}
    return URLParamSyncApp(history=history, timers=timers, **params)


# =============================================================================
# App Initialization
# =============================================================================

if __name__.startswith("bokeh"):
    app = create_app()
    pn.state.curdoc.title = app.config.doc_title
    layout = app.main_layout()
    layout.servable()
