from __future__ import annotations

import logging

from retdec.config import Settings
from retdec.errors import (
    InvalidResponseError,
    MissingInputError,
    RequestFailed,
    RetdecError,
)
from retdec.models import DecompilationArguments
from retdec.services.connection import (
    APIArguments,
    APIConnection,
    RequestsAPIConnection,
    ResponseVerifyingAPIConnection,
)
from retdec.services.decompilation import Decompilation

logger = logging.getLogger(__name__)


class Decompiler:
    """Submits binaries to the ``decompiler`` service."""

    def __init__(self, settings: Settings | None = None, conn: APIConnection | None = None):
        self.settings = settings or Settings()
        self.conn = ResponseVerifyingAPIConnection(conn or RequestsAPIConnection(self.settings))

    @staticmethod
    def _create_api_args(args: DecompilationArguments) -> APIArguments:
        if args.input_file is None:
            raise MissingInputError("no input file given")
        api_args = APIArguments()
        api_args.add_string_arg("mode", "bin")
        api_args.add_file("input", args.input_file)
        return api_args

    def start_decompilation(self, args: DecompilationArguments) -> Decompilation:
        api_args = self._create_api_args(args)
        url = f"{self.conn.api_url}/decompiler/decompilations"
        try:
            response = self.conn.send_post_request(url, api_args)
        except RetdecError as exc:
            raise RequestFailed(
                "failed to start a decompilation",
                status_code=getattr(exc, "status_code", None),
            ) from exc
        id = response.json_value_as_string("id")
        if id is None:
            raise InvalidResponseError(f"{url} returned invalid JSON response")
        logger.info("started decompilation %s of %s", id, args.input_file.name)
        return Decompilation(id, self.conn)
