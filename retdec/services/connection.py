from __future__ import annotations

import io
import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import requests

from retdec.config import Settings, user_agent
from retdec.errors import (
    ConfigError,
    DecodeError,
    NotAFileError,
    RequestFailed,
    TransportError,
)
from retdec.file import File

logger = logging.getLogger(__name__)

_ATTACHMENT_RE = re.compile(r'^\s*attachment;\s*filename="?([^";]+)"?\s*$', re.IGNORECASE)


@dataclass
class APIArguments:
    args: dict[str, str] = field(default_factory=dict)
    files: dict[str, File] = field(default_factory=dict)

    def add_string_arg(self, name: str, value: str) -> None:
        self.args[name] = value

    def add_opt_string_arg(self, name: str, value: str | None) -> None:
        if value is not None:
            self.add_string_arg(name, value)

    def add_bool_arg(self, name: str, value: bool) -> None:
        self.args[name] = "1" if value else "0"

    def add_opt_bool_arg(self, name: str, value: bool | None) -> None:
        if value is not None:
            self.add_bool_arg(name, value)

    def add_file(self, name: str, file: File) -> None:
        self.files[name] = file

    def has_arg(self, name: str) -> bool:
        return name in self.args

    def get_arg(self, name: str) -> str | None:
        return self.args.get(name)

    def get_file(self, name: str) -> File | None:
        return self.files.get(name)


@dataclass(frozen=True)
class APIResponse:
    status_code: int = 0
    status_message: str = ""
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""

    def succeeded(self) -> bool:
        return 200 <= self.status_code <= 299

    def failed(self) -> bool:
        return not self.succeeded()

    def header(self, name: str) -> str | None:
        wanted = name.lower()
        return next((v for k, v in self.headers if k.lower() == wanted), None)

    def body_as_text(self) -> str:
        try:
            return self.body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError("failed to decode API response body as UTF-8") from exc

    def body_as_json(self) -> Any:
        text = self.body_as_text()
        try:
            return json.loads(text)
        except ValueError as exc:
            raise DecodeError("failed to parse API response body as JSON") from exc

    def _json_value(self, key: str) -> Any:
        try:
            content = self.body_as_json()
        except DecodeError:
            return None
        if not isinstance(content, dict):
            return None
        return content.get(key)

    def json_value_as_string(self, key: str) -> str | None:
        value = self._json_value(key)
        return value if isinstance(value, str) else None

    def json_value_as_bool(self, key: str) -> bool | None:
        value = self._json_value(key)
        return value if isinstance(value, bool) else None

    def body_as_file(self) -> File:
        disposition = self.header("Content-Disposition")
        match = _ATTACHMENT_RE.match(disposition) if disposition else None
        if not match:
            raise NotAFileError("API response does not contain a file")
        return File(content=self.body, name=match.group(1))

    def error_reason(self) -> str:
        reason = (
            self.json_value_as_string("description")
            or self.json_value_as_string("message")
            or self.status_message
            or "unknown error"
        )
        if self.status_code:
            reason = f"{reason} (HTTP {self.status_code})"
        return reason


class APIConnection(ABC):
    @property
    @abstractmethod
    def api_url(self) -> str:
        ...

    @abstractmethod
    def send_get_request(self, url: str, args: APIArguments) -> APIResponse:
        ...

    @abstractmethod
    def send_post_request(self, url: str, args: APIArguments) -> APIResponse:
        ...

    def send_get_request_without_args(self, url: str) -> APIResponse:
        return self.send_get_request(url, APIArguments())


class RequestsAPIConnection(APIConnection):
    def __init__(self, settings: Settings):
        self.settings = settings
        self._session = requests.Session()
        self._session.headers["User-Agent"] = user_agent()

    @property
    def api_url(self) -> str:
        return self.settings.api_url

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "RequestsAPIConnection":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _auth(self) -> tuple[str, str]:
        if not self.settings.api_key:
            raise ConfigError("missing API key")
        # Basic auth credentials go over the wire as latin-1.
        try:
            self.settings.api_key.encode("latin-1")
        except UnicodeEncodeError as exc:
            raise ConfigError("API key contains unsupported characters") from exc
        return self.settings.api_key, ""

    def _send(self, method: str, url: str, **kwargs: Any) -> APIResponse:
        auth = self._auth()
        logger.debug("sending %s request to %s", method, url)
        try:
            resp = self._session.request(
                method,
                url,
                auth=auth,
                timeout=self.settings.request_timeout_s,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise TransportError(f"failed to send a {method} request to {url}") from exc

        logger.debug("%s %s returned HTTP %s", method, url, resp.status_code)
        return APIResponse(
            status_code=resp.status_code,
            status_message=resp.reason or "",
            headers=list(resp.headers.items()),
            body=resp.content,
        )

    def send_get_request(self, url: str, args: APIArguments) -> APIResponse:
        return self._send("GET", url, params=dict(args.args))

    def send_post_request(self, url: str, args: APIArguments) -> APIResponse:
        files = {
            name: (file.safe_name(), io.BytesIO(file.content), "application/octet-stream")
            for name, file in args.files.items()
        }
        # requests only emits multipart/form-data when at least one file is present.
        return self._send("POST", url, data=dict(args.args), files=files or None)


class ResponseVerifyingAPIConnection(APIConnection):
    """Turns every non-2xx response of the wrapped connection into ``RequestFailed``."""

    def __init__(self, conn: APIConnection):
        self.conn = conn

    @property
    def api_url(self) -> str:
        return self.conn.api_url

    @staticmethod
    def _ensure_request_succeeded(response: APIResponse) -> APIResponse:
        if response.failed():
            raise RequestFailed(response.error_reason(), status_code=response.status_code)
        return response

    def send_get_request(self, url: str, args: APIArguments) -> APIResponse:
        return self._ensure_request_succeeded(self.conn.send_get_request(url, args))

    def send_post_request(self, url: str, args: APIArguments) -> APIResponse:
        return self._ensure_request_succeeded(self.conn.send_post_request(url, args))
