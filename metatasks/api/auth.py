"""Access token placement for Graph API requests"""

from enum import Enum
from typing import Dict, Tuple


class AuthStrategy(str, Enum):
    """Where the access token goes on each request"""
    BEARER_HEADER = "bearer_header"
    QUERY_PARAM = "query_param"

    def apply(
        self,
        access_token: str,
        headers: Dict[str, str],
        params: Dict[str, object],
    ) -> Tuple[Dict[str, str], Dict[str, object]]:
        """Return copies of headers/params with the token attached"""
        headers = dict(headers)
        params = dict(params)
        if self is AuthStrategy.BEARER_HEADER:
            headers["Authorization"] = f"Bearer {access_token}"
        else:
            params["access_token"] = access_token
        return headers, params
