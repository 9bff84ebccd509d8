from __future__ import annotations

from retdec.file import File
from retdec.services.connection import APIConnection
from retdec.services.resource import Resource


class Decompilation(Resource):
    def __init__(self, id: str, conn: APIConnection):
        super().__init__("decompiler", "decompilations", id, conn)

    def get_output_hll_code(self) -> str:
        return self._get_output("decompilation", "outputs/hll").body_as_text()

    def get_output_hll_code_as_file(self) -> File:
        return self._get_output("decompilation", "outputs/hll").body_as_file()
