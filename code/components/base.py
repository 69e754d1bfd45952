"""Base component protocol for UI components.

All UI components should follow this pattern for consistency.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import panel as pn

if TYPE_CHECKING:
    from core.context import ParamContext


class BaseComponent(ABC):
    """
    Abstract base class for UI components.

    Components receive the shared ParamContext and re-render when its
    ``location`` changes.

    Usage:
        class MyComponent(BaseComponent):
            def create(self) -> pn.viewable.Viewable:
                return pn.bind(
                    self._render,
                    location=self.context.param.location,
                )
    """

    def __init__(self, context: "ParamContext"):
        """
        Initialize the component.

        Args:
            context: Shared search-param state
        """
        self.context = context

    @abstractmethod
    def create(self) -> pn.viewable.Viewable:
        """
        Create and return the Panel component.

        Returns:
            A Panel viewable object (Column, Row, pane, widget, etc.)
        """
        pass
