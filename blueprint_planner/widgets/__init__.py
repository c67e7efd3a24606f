"""Qt widgets for the blueprint viewer."""

from .blueprint_canvas import BlueprintCanvas
from .element_panel import ElementPanel
from .main_window import BlueprintViewerWindow

__all__ = ['BlueprintCanvas', 'ElementPanel', 'BlueprintViewerWindow']
