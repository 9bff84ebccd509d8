from __future__ import annotations

from typing import Any

from retdec.config import Settings
from retdec.errors import AuthenticationError, InvalidResponseError, RequestFailed
from retdec.services.connection import (
    APIArguments,
    APIConnection,
    RequestsAPIConnection,
    ResponseVerifyingAPIConnection,
)


class APITester:
    """Access to the ``test`` service: credential checks and echoing."""

    def __init__(self, settings: Settings | None = None, conn: APIConnection | None = None):
        self.settings = settings or Settings()
        self.conn = conn or RequestsAPIConnection(self.settings)

    def auth(self) -> None:
        url = f"{self.conn.api_url}/test"
        response = self.conn.send_get_request_without_args(url)
        if response.succeeded():
            return
        if response.status_code == 401:
            raise AuthenticationError("authentication failed", status_code=401)
        raise RequestFailed(
            f"request to {url} failed: {response.error_reason()}",
            status_code=response.status_code,
        )

    def echo(self, params: dict[str, str]) -> dict[str, Any]:
        url = f"{self.conn.api_url}/test/echo"
        args = APIArguments()
        for name, value in params.items():
            args.add_string_arg(name, value)
        response = ResponseVerifyingAPIConnection(self.conn).send_get_request(url, args)
        content = response.body_as_json()
        if not isinstance(content, dict):
            raise InvalidResponseError(f"{url} returned invalid JSON response")
        return content
