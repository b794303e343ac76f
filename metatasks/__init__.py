"""Meta Graph API tasks for Facebook Pages and Instagram professional accounts"""

from .app import TaskRunner
from .utils.exceptions import (
    Cancelled,
    InvalidArgument,
    MalformedResponse,
    MetaTasksError,
    ProcessingFailed,
    ProcessingTimeout,
    RemoteApiError,
)

__version__ = "0.1.0"

__all__ = [
    "TaskRunner",
    "MetaTasksError",
    "RemoteApiError",
    "MalformedResponse",
    "ProcessingFailed",
    "ProcessingTimeout",
    "Cancelled",
    "InvalidArgument",
]
