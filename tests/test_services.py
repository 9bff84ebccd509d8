"""Tests for the fileinfo, decompiler and test service façades."""

import pytest

from conftest import json_response
from retdec.config import Settings
from retdec.errors import (
    AuthenticationError,
    InvalidResponseError,
    MissingInputError,
    RequestFailed,
    TransportError,
)
from retdec.file import File
from retdec.models import AnalysisArguments, DecompilationArguments
from retdec.services.analysis import Analysis
from retdec.services.connection import APIArguments, APIResponse
from retdec.services.decompilation import Decompilation
from retdec.services.decompiler import Decompiler
from retdec.services.fileinfo import Fileinfo
from retdec.services.tester import APITester

API = "https://retdec.com/service/api"
ANALYSES = f"{API}/fileinfo/analyses"
DECOMPILATIONS = f"{API}/decompiler/decompilations"


@pytest.fixture
def input_file():
    return File(b"content", "file.exe")


@pytest.fixture
def fileinfo(conn):
    return Fileinfo(Settings(api_key="test"), conn=conn)


@pytest.fixture
def decompiler(conn):
    return Decompiler(Settings(api_key="test"), conn=conn)


# --- Fileinfo ---


def test_start_analysis_sends_all_arguments(conn, fileinfo, input_file):
    """Optional arguments are sent next to the input file."""
    conn.add_response("POST", ANALYSES, json_response({"id": "ID"}))

    analysis = fileinfo.start_analysis(
        AnalysisArguments(input_file=input_file, output_format="json", verbose=True)
    )

    assert isinstance(analysis, Analysis)
    assert analysis.id == "ID"
    expected = APIArguments()
    expected.add_string_arg("output_format", "json")
    expected.add_bool_arg("verbose", True)
    expected.add_file("input", input_file)
    assert conn.request_sent("POST", ANALYSES, expected)


def test_start_analysis_omits_unset_optional_arguments(conn, fileinfo, input_file):
    """Unset optional arguments do not reach the request."""
    conn.add_response("POST", ANALYSES, json_response({"id": "ID"}))

    fileinfo.start_analysis(AnalysisArguments(input_file=input_file))

    sent = conn.requests[0].args
    assert sent.args == {}
    assert sent.get_file("input") == input_file


def test_start_analysis_without_input_file_sends_nothing(conn, fileinfo):
    """A missing input file fails before any request."""
    with pytest.raises(MissingInputError, match="no input file given"):
        fileinfo.start_analysis(AnalysisArguments())
    assert conn.requests == []


def test_start_analysis_without_id_in_reply(conn, fileinfo, input_file):
    conn.add_response("POST", ANALYSES, json_response({}))
    with pytest.raises(InvalidResponseError) as excinfo:
        fileinfo.start_analysis(AnalysisArguments(input_file=input_file))
    assert str(excinfo.value) == f"{ANALYSES} returned invalid JSON response"


def test_start_analysis_surfaces_http_errors(conn, fileinfo, input_file):
    """A rejected submission names the step and keeps the server's reason."""
    conn.add_response(
        "POST",
        ANALYSES,
        json_response({"description": "Invalid input file."}, status_code=400, status_message="Bad Request"),
    )
    with pytest.raises(RequestFailed, match="^failed to start an analysis$") as excinfo:
        fileinfo.start_analysis(AnalysisArguments(input_file=input_file))
    assert excinfo.value.status_code == 400
    assert str(excinfo.value.__cause__) == "Invalid input file. (HTTP 400)"
    assert conn.count_requests("POST", ANALYSES) == 1


def test_analysis_reuses_the_facade_connection(conn, fileinfo, input_file):
    """Status refreshes go through the verifying connection."""
    conn.add_response("POST", ANALYSES, json_response({"id": "ID"}))
    conn.add_response(
        "GET", f"{ANALYSES}/ID/status", APIResponse(status_code=500, status_message="Internal Server Error")
    )
    analysis = fileinfo.start_analysis(AnalysisArguments(input_file=input_file))
    with pytest.raises(RequestFailed):
        analysis.update_status()


# --- Decompiler ---


def test_start_decompilation_sends_mode_and_input(conn, decompiler, input_file):
    """Decompilations always run in binary mode."""
    conn.add_response("POST", DECOMPILATIONS, json_response({"id": "ID"}))

    decompilation = decompiler.start_decompilation(DecompilationArguments(input_file=input_file))

    assert isinstance(decompilation, Decompilation)
    assert decompilation.id == "ID"
    expected = APIArguments()
    expected.add_string_arg("mode", "bin")
    expected.add_file("input", input_file)
    assert conn.request_sent("POST", DECOMPILATIONS, expected)


def test_start_decompilation_without_input_file_sends_nothing(conn, decompiler):
    with pytest.raises(MissingInputError, match="no input file given"):
        decompiler.start_decompilation(DecompilationArguments())
    assert conn.requests == []


def test_start_decompilation_without_id_in_reply(conn, decompiler, input_file):
    """A non-string id is an invalid reply."""
    conn.add_response("POST", DECOMPILATIONS, json_response({"id": 42}))
    with pytest.raises(InvalidResponseError) as excinfo:
        decompiler.start_decompilation(DecompilationArguments(input_file=input_file))
    assert str(excinfo.value) == f"{DECOMPILATIONS} returned invalid JSON response"


def test_start_decompilation_adds_context_to_transport_errors(conn, decompiler, input_file):
    """Network failures during submission are wrapped with context."""
    conn.add_response("POST", DECOMPILATIONS, TransportError("connection reset"))
    with pytest.raises(RequestFailed, match="^failed to start a decompilation$") as excinfo:
        decompiler.start_decompilation(DecompilationArguments(input_file=input_file))
    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, TransportError)


def test_decompile_end_to_end(conn, decompiler, input_file, sleeps):
    """Submit, wait and fetch the decompiled code."""
    conn.add_response("POST", DECOMPILATIONS, json_response({"id": "ID"}))
    conn.add_response("GET", f"{DECOMPILATIONS}/ID/status", json_response(
        {"finished": False, "succeeded": False, "failed": False}
    ))
    conn.add_response("GET", f"{DECOMPILATIONS}/ID/status", json_response(
        {"finished": True, "succeeded": True, "failed": False}
    ))
    conn.add_response(
        "GET", f"{DECOMPILATIONS}/ID/outputs/hll", APIResponse(status_code=200, body=b"int main() {}")
    )

    decompilation = decompiler.start_decompilation(DecompilationArguments(input_file=input_file))
    decompilation.wait_until_finished()

    assert decompilation.get_output_hll_code() == "int main() {}"
    assert len(sleeps) == 2


# --- APITester ---


@pytest.fixture
def tester(conn):
    return APITester(Settings(api_key="test"), conn=conn)


def test_auth_succeeds(conn, tester):
    conn.add_response("GET", f"{API}/test", json_response({}))
    assert tester.auth() is None


def test_auth_fails_on_401(conn, tester):
    """Rejected credentials raise AuthenticationError."""
    conn.add_response(
        "GET",
        f"{API}/test",
        json_response(
            {
                "code": 401,
                "description": "API key authorization failed.",
                "message": "Unauthorized by API Key",
            },
            status_code=401,
            status_message="Unauthorized",
        ),
    )
    with pytest.raises(AuthenticationError, match="^authentication failed$"):
        tester.auth()


def test_auth_reports_other_failures(conn, tester):
    """Other HTTP failures carry the URL and reason."""
    conn.add_response("GET", f"{API}/test", APIResponse(status_code=404))
    with pytest.raises(RequestFailed) as excinfo:
        tester.auth()
    assert not isinstance(excinfo.value, AuthenticationError)
    assert "HTTP 404" in str(excinfo.value)
    assert f"request to {API}/test failed" in str(excinfo.value)


def test_echo_returns_parameters(conn, tester):
    """Echo sends the parameters as a query and returns the reply."""
    conn.add_response("GET", f"{API}/test/echo", json_response({"param1": "value1", "param2": "value2"}))

    result = tester.echo({"param1": "value1", "param2": "value2"})

    assert result == {"param1": "value1", "param2": "value2"}
    expected = APIArguments()
    expected.add_string_arg("param1", "value1")
    expected.add_string_arg("param2", "value2")
    assert conn.request_sent("GET", f"{API}/test/echo", expected)


def test_echo_rejects_non_object_reply(conn, tester):
    conn.add_response("GET", f"{API}/test/echo", json_response(["value1"]))
    with pytest.raises(InvalidResponseError):
        tester.echo({"param1": "value1"})
