"""
Render module - Surface contract and the vis-network mirror
"""

from .surface import RenderSurface, bind_surface
from .vis import VisDataMirror

__all__ = ["RenderSurface", "bind_surface", "VisDataMirror"]
