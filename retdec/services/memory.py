from __future__ import annotations

import copy
from dataclasses import dataclass

from retdec.config import DEFAULT_API_URL
from retdec.errors import TransportError
from retdec.services.connection import APIArguments, APIConnection, APIResponse


@dataclass
class SentRequest:
    method: str
    url: str
    args: APIArguments


class InMemoryAPIConnection(APIConnection):
    """Offline connection serving canned replies and recording what was sent.

    Replies are matched by method and URL; the first queued reply wins and is
    consumed. A reply may also be an exception instance, which is raised.
    """

    def __init__(self, api_url: str = DEFAULT_API_URL):
        self._api_url = api_url.rstrip("/")
        self.requests: list[SentRequest] = []
        self._replies: list[tuple[str, str, APIResponse | Exception]] = []

    @property
    def api_url(self) -> str:
        return self._api_url

    def add_response(self, method: str, url: str, response: APIResponse | Exception) -> None:
        self._replies.append((method.upper(), url, response))

    def request_sent(self, method: str, url: str, args: APIArguments | None = None) -> bool:
        args = args if args is not None else APIArguments()
        return SentRequest(method.upper(), url, args) in self.requests

    def count_requests(self, method: str | None = None, url: str | None = None) -> int:
        return sum(
            1
            for r in self.requests
            if (method is None or r.method == method.upper()) and (url is None or r.url == url)
        )

    def _reply(self, method: str, url: str, args: APIArguments) -> APIResponse:
        self.requests.append(SentRequest(method, url, copy.deepcopy(args)))
        for i, (m, u, reply) in enumerate(self._replies):
            if m == method and u == url:
                del self._replies[i]
                if isinstance(reply, Exception):
                    raise reply
                return reply
        raise TransportError(f"no response set for {method} request to {url}")

    def send_get_request(self, url: str, args: APIArguments) -> APIResponse:
        return self._reply("GET", url, args)

    def send_post_request(self, url: str, args: APIArguments) -> APIResponse:
        return self._reply("POST", url, args)
