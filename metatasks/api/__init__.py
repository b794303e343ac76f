"""Graph API transport"""

from .auth import AuthStrategy
from .graph_client import GraphClient, GraphResponse

__all__ = [
    "AuthStrategy",
    "GraphClient",
    "GraphResponse",
]
