"""Reusable Panel components built on the search-param engine."""

from .base import BaseComponent
from .param_link import ParamLink
from .widget_sync import WidgetBinding, sync_widget, sync_widgets
from .with_params import bind_to_location, with_params

__all__ = [
    "BaseComponent",
    "ParamLink",
    "WidgetBinding",
    "bind_to_location",
    "sync_widget",
    "sync_widgets",
    "with_params",
]
