"""Generic handle to an asynchronous job running on the service.

The service has no push or notification mechanism, so the only way to learn
that a job has finished is to poll its ``status`` sub-resource.
"""

from __future__ import annotations

import logging
import time

from pydantic import ValidationError

from retdec.errors import InvalidResponseError, ResourceNotSucceeded
from retdec.models import JobStatus
from retdec.services.connection import APIConnection, APIResponse

logger = logging.getLogger(__name__)


class Resource:
    """A job (analysis, decompilation) identified by a server-assigned id.

    Calls block until the service replies. Instances are not thread-safe:
    the status fields are mutated in place by every refresh, so sharing one
    across threads needs the caller's own locking.
    """

    POLL_INTERVAL_S = 0.5

    def __init__(self, service_name: str, resources_name: str, id: str, conn: APIConnection):
        self.id = id
        self.conn = conn
        self.base_url = f"{conn.api_url}/{service_name}/{resources_name}/{id}"
        self.status_url = f"{self.base_url}/status"
        self.finished = False
        self.succeeded = False
        self.failed = False
        self.error: str | None = None

    def update_status(self) -> JobStatus:
        response = self.conn.send_get_request_without_args(self.status_url)
        try:
            status = JobStatus.model_validate(response.body_as_json())
        except ValidationError as exc:
            raise InvalidResponseError(f"{self.status_url} returned invalid JSON response") from exc

        # A finished job keeps its terminal state whatever later replies say.
        if not self.finished:
            self.finished = status.finished
            self.succeeded = status.succeeded
            self.failed = status.failed
            if status.error is not None:
                self.error = status.error
        logger.debug(
            "%s: finished=%s succeeded=%s failed=%s",
            self.id,
            self.finished,
            self.succeeded,
            self.failed,
        )
        return status

    def _update_status_if_not_finished(self) -> None:
        if not self.finished:
            self.update_status()

    def has_finished(self) -> bool:
        self._update_status_if_not_finished()
        return self.finished

    def has_succeeded(self) -> bool:
        self._update_status_if_not_finished()
        return self.succeeded

    def has_failed(self) -> bool:
        self._update_status_if_not_finished()
        return self.failed

    def get_error(self) -> str | None:
        self._update_status_if_not_finished()
        return self.error

    def wait_until_finished(self) -> None:
        """Block until the job finishes, polling its status at a fixed interval.

        There is no way to interrupt a wait in progress; run it in a separate
        thread to be able to give up on it.
        """
        while not self.finished:
            time.sleep(self.POLL_INTERVAL_S)
            self.update_status()
        logger.info("%s finished (succeeded=%s)", self.id, self.succeeded)

    def ensure_succeeded(self, name: str) -> None:
        # Pending and failed jobs are reported alike.
        if not self.has_succeeded():
            raise ResourceNotSucceeded(f"{name} has not succeeded")

    def _get_output(self, name: str, path: str) -> APIResponse:
        self.ensure_succeeded(name)
        return self.conn.send_get_request_without_args(f"{self.base_url}/{path}")
