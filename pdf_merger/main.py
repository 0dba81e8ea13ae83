"""Entry-point for merging PDF files under a generated bookmark outline."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence

from pdf_merger.merger.assembler import Assembler, MergeResult
from pdf_merger.utils.config import MIN_INPUT_FILES, MergeSettings
from pdf_merger.utils.debug import DebugDumper, MergeReport
from pdf_merger.utils.errors import ConfigurationError, MergeError
from pdf_merger.utils.logger import get_logger, set_verbosity

LOGGER = get_logger(__name__)


def merge_pdfs(settings: MergeSettings) -> MergeResult:
    """Merge the configured inputs and write the merged document."""
    if len(settings.files) < MIN_INPUT_FILES:
        raise ConfigurationError("files must be more than 1")

    output_path = settings.output_path()
    LOGGER.info("Merging %d files into %s", len(settings.files), output_path)
    result = Assembler().merge_files(settings.input_paths(), output_path)

    if settings.debug:
        report = MergeReport.from_graph(result.graph, result.sources)
        DebugDumper(settings.debug_dir()).dump(report)
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Merge PDF files and add a bookmark per source document")
    parser.add_argument("-p", "--predir", type=Path, default=Path("."), help="Directory the input files live in")
    parser.add_argument(
        "-f",
        "--files",
        type=Path,
        action="append",
        default=[],
        help="Input PDF, relative to --predir (repeat for each file, in merge order)",
    )
    parser.add_argument("-o", "--output", type=Path, help="Directory to write merged.pdf into")
    parser.add_argument("--verbose", action="store_true", help="Log per-document details")
    parser.add_argument("--debug", action="store_true", help="Write a JSON merge report next to the output")
    return parser


def settings_from_args(argv: Optional[Sequence[str]] = None) -> MergeSettings:
    args = build_parser().parse_args(argv)
    set_verbosity(args.verbose)
    return MergeSettings(
        files=list(args.files),
        base_dir=args.predir,
        output_dir=args.output,
        debug=args.debug,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the merge from command-line arguments and return an exit status."""
    settings = settings_from_args(argv)
    try:
        merge_pdfs(settings)
    except MergeError as exc:
        LOGGER.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
