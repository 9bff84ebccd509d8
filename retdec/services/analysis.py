from __future__ import annotations

from retdec.file import File
from retdec.services.connection import APIConnection
from retdec.services.resource import Resource


class Analysis(Resource):
    def __init__(self, id: str, conn: APIConnection):
        super().__init__("fileinfo", "analyses", id, conn)

    def get_output(self) -> str:
        return self._get_output("analysis", "output").body_as_text()

    def get_output_as_file(self) -> File:
        return self._get_output("analysis", "output").body_as_file()
