"""Command-line tools: ``decompiler`` and ``fileinfo``."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable

from retdec.config import Settings, __version__
from retdec.errors import RetdecError, print_error
from retdec.file import File
from retdec.models import AnalysisArguments, DecompilationArguments
from retdec.services.decompiler import Decompiler
from retdec.services.fileinfo import Fileinfo


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        self.exit(1, f"error: {message}\n")


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("file", metavar="FILE", help="Input file")
    p.add_argument(
        "--api-key", "-k",
        metavar="KEY",
        help="API key to be used (default: $RETDEC_API_KEY)",
    )
    p.add_argument(
        "--api-url", "-u",
        metavar="URL",
        help="Custom URL to the retdec.com API (default: $RETDEC_API_URL)",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")


def parse_decompiler_args(args: list[str] | None = None) -> argparse.Namespace:
    p = _ArgumentParser(
        prog="decompiler",
        description="Decompiles the given file via retdec.com's API.",
    )
    _add_common_args(p)
    return p.parse_args(args)


def parse_fileinfo_args(args: list[str] | None = None) -> argparse.Namespace:
    p = _ArgumentParser(
        prog="fileinfo",
        description="Analyzes the given file via retdec.com's API.",
    )
    _add_common_args(p)
    p.add_argument(
        "--output-format", "-f",
        choices=["plain", "json"],
        help="Output format (default: plain)",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print all available information about the file",
    )
    return p.parse_args(args)


def _setup(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env(api_key=args.api_key, api_url=args.api_url)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return settings


def run_decompiler(argv: list[str] | None = None) -> None:
    args = parse_decompiler_args(argv)
    settings = _setup(args)
    decompiler = Decompiler(settings)
    decompilation = decompiler.start_decompilation(
        DecompilationArguments(input_file=File.from_path(args.file))
    )
    decompilation.wait_until_finished()
    sys.stdout.write(decompilation.get_output_hll_code())


def run_fileinfo(argv: list[str] | None = None) -> None:
    args = parse_fileinfo_args(argv)
    settings = _setup(args)
    fileinfo = Fileinfo(settings)
    analysis = fileinfo.start_analysis(
        AnalysisArguments(
            input_file=File.from_path(args.file),
            output_format=args.output_format,
            verbose=True if args.verbose else None,
        )
    )
    analysis.wait_until_finished()
    sys.stdout.write(analysis.get_output())


def _main(run: Callable[[list[str] | None], None], argv: list[str] | None) -> int:
    try:
        run(argv)
    except RetdecError as exc:
        print_error(exc, sys.stderr)
        return 1
    except SystemExit as exc:
        # Raised by argparse for --help, --version and usage errors.
        return int(exc.code or 0)
    return 0


def decompiler_main(argv: list[str] | None = None) -> int:
    return _main(run_decompiler, argv)


def fileinfo_main(argv: list[str] | None = None) -> int:
    return _main(run_fileinfo, argv)
