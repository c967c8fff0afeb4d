"""
Fetch module - Remote walker client and fetch coordination
"""

from .errors import FetchFailure, AuthenticationError, ServerError, ResponseFormatError
from .source import GraphSource
from .client import JivasClient
from .local import LocalGraphSource
from .coordinator import FetchCoordinator

__all__ = [
    "FetchFailure",
    "AuthenticationError",
    "ServerError",
    "ResponseFormatError",
    "GraphSource",
    "JivasClient",
    "LocalGraphSource",
    "FetchCoordinator",
]
