from typing import Any, Dict, Optional

from fastapi import status
from starlette.responses import Response

from realty_auth.libs.result import Error


class ClientError(Exception):
    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        data: Optional[Dict[str, Any]] = None,
    ):
        self.base_error = base_error
        self.status_code = status_code
        self.data = data
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


class RateLimitExceeded(Exception):
    """Carries the ready-made 429 response from a route-level rate limit"""

    def __init__(self, response: Response):
        self.response = response
        super().__init__("Too many requests")
