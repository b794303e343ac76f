"""Custom exceptions for Meta Graph tasks"""

import json
from typing import Any, Optional


class MetaTasksError(Exception):
    """Base exception for metatasks"""
    pass


class RemoteApiError(MetaTasksError):
    """Non-2xx response (or transport failure) from the Graph API"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.error_code: Optional[int] = None
        self.error_message: Optional[str] = None
        error = _graph_error(body)
        if error:
            self.error_code = error.get("code")
            self.error_message = error.get("message")
        super().__init__(message)


class MalformedResponse(MetaTasksError):
    """2xx response that is missing an expected field or is not a JSON object"""

    def __init__(self, message: str, body: Optional[str] = None):
        self.body = body
        super().__init__(message)


class ProcessingFailed(MetaTasksError):
    """Provider reported ERROR while processing a media container"""

    def __init__(self, container_id: str):
        self.container_id = container_id
        super().__init__(f"Media processing failed for container: {container_id}")


class ProcessingTimeout(MetaTasksError):
    """Container did not reach FINISHED before the deadline"""

    def __init__(self, container_id: str, elapsed: float):
        self.container_id = container_id
        self.elapsed = elapsed
        super().__init__(
            f"Media processing timeout after {elapsed:.1f} seconds for container: {container_id}"
        )


class Cancelled(MetaTasksError):
    """Task was cancelled by the host while waiting"""

    def __init__(self, container_id: Optional[str] = None):
        self.container_id = container_id
        message = "Task cancelled"
        if container_id:
            message += f" while waiting for container: {container_id}"
        super().__init__(message)


class InvalidArgument(MetaTasksError):
    """Caller input violates a precondition. Raised before any network call."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class ConfigError(MetaTasksError):
    """Configuration error"""
    pass


def _graph_error(body: Optional[str]) -> Optional[dict]:
    """Pull the Graph API {"error": {...}} object out of a raw body, if any."""
    if not body:
        return None
    try:
        payload: Any = json.loads(body)
    except ValueError:
        return None
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        return payload["error"]
    return None
