"""Meta Graph API client"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import requests

from ..utils.exceptions import MalformedResponse, RemoteApiError
from ..utils.logger import get_logger
from .auth import AuthStrategy

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://graph.facebook.com"
DEFAULT_API_VERSION = "v24.0"


@dataclass(frozen=True)
class GraphResponse:
    """Raw HTTP outcome: status code plus the body exactly as received"""
    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class GraphClient:
    """
    Thin client for the Graph API.

    One instance per task invocation. Use it as a context manager so the
    underlying session is closed on every exit path.
    """

    def __init__(
        self,
        access_token: str,
        api_base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        auth_strategy: AuthStrategy = AuthStrategy.BEARER_HEADER,
        connection_timeout: float = 30,
        read_timeout: float = 60,
        session: Optional[requests.Session] = None,
    ):
        self.access_token = access_token
        self.api_base_url = api_base_url.rstrip("/")
        self.api_version = api_version
        self.auth_strategy = AuthStrategy(auth_strategy)
        self.connection_timeout = connection_timeout
        self.read_timeout = read_timeout
        # (connect, read)
        self.timeout = (connection_timeout, read_timeout)
        self.session = session or requests.Session()

    def __repr__(self) -> str:
        return (
            f"GraphClient(api_base_url={self.api_base_url!r}, "
            f"api_version={self.api_version!r}, auth_strategy={self.auth_strategy.value!r})"
        )

    def __enter__(self) -> "GraphClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def build_url(self, endpoint: str) -> str:
        return f"{self.api_base_url}/{self.api_version}/{endpoint.lstrip('/')}"

    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        timeout: Optional[Tuple[float, float]] = None,
    ) -> GraphResponse:
        """
        Make a single HTTP request to the Graph API

        Args:
            method: HTTP method (GET, POST, DELETE)
            endpoint: API path below the version segment
            params: Query parameters
            json_body: Request body, serialized as JSON
            timeout: Optional (connect, read) timeout for this request

        Returns:
            Status code and raw body. The status is not judged here.

        Raises:
            RemoteApiError: If the request could not be completed at all
        """
        url = self.build_url(endpoint)
        headers, params = self.auth_strategy.apply(self.access_token, {}, params or {})
        timeout_value = timeout if timeout is not None else self.timeout

        logger.debug(
            "Making Graph API request",
            method=method,
            endpoint=endpoint,
            timeout=timeout_value,
        )
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=timeout_value,
            )
        except requests.exceptions.Timeout as e:
            logger.error("Request timeout", endpoint=endpoint, timeout=timeout_value, error=str(e))
            raise RemoteApiError(f"Request timeout after {timeout_value} seconds: {e}")
        except requests.exceptions.RequestException as e:
            logger.error("Request failed", endpoint=endpoint, error=str(e))
            raise RemoteApiError(f"Request failed: {e}")

        logger.debug(
            "Received response from Graph API",
            method=method,
            endpoint=endpoint,
            status_code=response.status_code,
        )
        return GraphResponse(status_code=response.status_code, text=response.text)

    def request_json(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        timeout: Optional[Tuple[float, float]] = None,
        action: str = "call Graph API",
    ) -> Dict[str, Any]:
        """
        Make a request and decode a 2xx JSON object response

        Raises:
            RemoteApiError: Non-2xx status. Message carries status and raw body.
            MalformedResponse: 2xx body that is not a JSON object
        """
        response = self._request_ok(method, endpoint, params, json_body, timeout, action)
        return decode_object(response.text)

    def request_field(
        self,
        method: str,
        endpoint: str,
        field: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        action: str = "call Graph API",
    ) -> str:
        """Make a request and return one required field of the 2xx JSON response"""
        response = self._request_ok(method, endpoint, params, json_body, None, action)
        return require_field(decode_object(response.text), field, body=response.text)

    def _request_ok(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]],
        json_body: Optional[Dict[str, Any]],
        timeout: Optional[Tuple[float, float]],
        action: str,
    ) -> GraphResponse:
        response = self.request(method, endpoint, params=params, json_body=json_body, timeout=timeout)
        if not response.ok:
            raise RemoteApiError(
                f"Failed to {action}: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        return response


def decode_object(body: str) -> Dict[str, Any]:
    """Parse a response body that must be a JSON object"""
    try:
        payload = json.loads(body)
    except ValueError:
        raise MalformedResponse(f"Response is not valid JSON: {body}", body=body)
    if not isinstance(payload, dict):
        raise MalformedResponse(f"Response is not a JSON object: {body}", body=body)
    return payload


def require_field(payload: Dict[str, Any], field: str, body: Optional[str] = None) -> str:
    """Return payload[field] as a string, or raise MalformedResponse carrying the raw body"""
    value = payload.get(field)
    if value is None or value == "":
        if body is None:
            body = json.dumps(payload)
        raise MalformedResponse(f"Response missing '{field}' field: {body}", body=body)
    return str(value)
