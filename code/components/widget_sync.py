"""Two-way binding between Panel widgets and search params.

Panel's ``location.sync()`` writes the URL directly from every widget, which
races when several widgets change at once. Here widget changes go through
the param setters (and so through the batched scheduler), and navigations
flow back into the widget.
"""

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from core.context import ParamContext
    from core.registry import ParamSetter

logger = logging.getLogger(__name__)


class WidgetBinding:
    """Keeps one widget parameter and one search param in sync."""

    def __init__(
        self,
        context: "ParamContext",
        widget: Any,
        name: str,
        default: Any = None,
        kind: Any = None,
        parameter: str = "value",
    ):
        """
        Initialize the binding and apply the URL value to the widget.

        Args:
            context: Shared search-param state
            widget: Panel widget (or any Parameterized)
            name: Search param name
            default: Default value of the param
            kind: Explicit parameter kind
            parameter: Widget parameter to bind
        """
        self.context = context
        self.widget = widget
        self.name = name
        self.default = default
        self.kind = kind
        self.parameter = parameter
        self._updating = False

        value, self.setter = self._read()
        self._apply(value)
        self._widget_watcher = widget.param.watch(self._on_widget_change, parameter)
        self._location_watcher = context.param.watch(self._on_location_change, "location")

    def _read(self) -> tuple[Any, "ParamSetter"]:
        return self.context.search_params().param(self.name, self.default, kind=self.kind)

    def _apply(self, value: Any) -> None:
        if isinstance(value, tuple):
            value = list(value)
        if getattr(self.widget, self.parameter) == value:
            return
        self._updating = True
        try:
            setattr(self.widget, self.parameter, value)
        except ValueError as e:
            logger.warning(f"Cannot apply URL value {value!r} of '{self.name}' to widget: {e}")
        finally:
            self._updating = False

    def _on_widget_change(self, event) -> None:
        # Prevent re-entry while applying a URL value (avoids URL sync loops)
        if self._updating:
            return
        self.setter(event.new)

    def _on_location_change(self, event) -> None:
        if self.context.closed:
            return
        value, self.setter = self._read()
        self._apply(value)

    def unlink(self) -> None:
        """Stop syncing."""
        self.widget.param.unwatch(self._widget_watcher)
        self.context.param.unwatch(self._location_watcher)


def sync_widget(
    context: "ParamContext",
    widget: Any,
    name: str,
    default: Any = None,
    kind: Any = None,
    parameter: str = "value",
) -> WidgetBinding:
    """Bind ``widget.<parameter>`` to search param ``name``."""
    return WidgetBinding(context, widget, name, default=default, kind=kind, parameter=parameter)


def sync_widgets(context: "ParamContext", widgets_mapping: dict) -> list[WidgetBinding]:
    """
    Bind several widgets at once.

    Args:
        context: Shared search-param state
        widgets_mapping: Dict mapping widget to (url_param_name, default)

    Returns:
        The created bindings
    """
    return [
        sync_widget(context, widget, name, default)
        for widget, (name, default) in widgets_mapping.items()
    ]
