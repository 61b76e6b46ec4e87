import argparse
import os
import sys
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .checker import SmilChecker
from .cleanup import cleanup_extraction_dir
from .epub_package import find_smil_files, unzip_epub
from .errors import SmilCheckError, UnzipError
from .events import EventEmitter
from .models import Thresholds
from .pipeline import run_book_check
from .progress import STAGE_PACKAGE, STAGE_UNZIP, StageProgress
from .runtime import (
    load_thresholds,
    resolve_concurrency,
    resolve_thresholds_path,
    resolve_verbose,
)
from .tokenizer import NltkTokenizer, Tokenizer


USAGE = "Usage: smilcheck (<book.epub>|<book.smil>)"
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_UNZIP_FAILED = 2


class UsageArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        print(USAGE, flush=True)
        print(message, file=sys.stderr, flush=True)
        raise SystemExit(EXIT_FAILURE)


@dataclass
class MainDeps:
    parse_args: Callable[[Optional[Sequence[str]]], argparse.Namespace]
    event_emitter_cls: Callable[..., EventEmitter]
    load_thresholds: Callable[[Optional[str]], Thresholds]
    create_tokenizer: Callable[[], Tokenizer]
    unzip_epub: Callable[[str], str]
    find_smil_files: Callable[[str], Tuple[str, List[str]]]
    run_book_check: Callable[..., Any]
    cleanup_extraction_dir: Callable[[Optional[str]], Optional[BaseException]]
    progress_cls: Callable[[], StageProgress]


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = UsageArgumentParser(
        prog="smilcheck",
        usage="smilcheck (<book.epub>|<book.smil>)",
        description="Report timing and pacing anomalies in EPUB media overlays",
    )
    parser.add_argument("input", help="Path to an EPUB or a single SMIL file")
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Number of SMIL files checked in parallel (default: 1)",
    )
    parser.add_argument(
        "--thresholds",
        help="JSON file overriding the default thresholds",
    )
    parser.add_argument(
        "--log_file",
        help="Optional path to append all output lines",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar on stderr while checking an EPUB",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print phase and per-file status lines on stderr",
    )
    return parser.parse_args(argv)


DEFAULT_MAIN_DEPS = MainDeps(
    parse_args=parse_args,
    event_emitter_cls=EventEmitter,
    load_thresholds=load_thresholds,
    create_tokenizer=NltkTokenizer,
    unzip_epub=unzip_epub,
    find_smil_files=find_smil_files,
    run_book_check=run_book_check,
    cleanup_extraction_dir=cleanup_extraction_dir,
    progress_cls=StageProgress,
)


def is_smil_path(path: str) -> bool:
    return os.path.splitext(path)[1] == ".smil"


def _check_epub(
    args: argparse.Namespace,
    deps: MainDeps,
    events: EventEmitter,
    checker_factory: Callable[[], SmilChecker],
    concurrency: int,
) -> int:
    progress_context = deps.progress_cls() if args.progress else nullcontext(None)
    with progress_context as progress:
        events.emit("phase", phase="UNZIP")
        try:
            temp_dir = deps.unzip_epub(args.input)
        except UnzipError as exc:
            events.error(f"Unzip failed: {exc}")
            return EXIT_UNZIP_FAILED

        main_error: Optional[BaseException] = None
        try:
            if progress is not None:
                progress.update(STAGE_UNZIP)

            events.emit("phase", phase="PACKAGE")
            package_path, smil_paths = deps.find_smil_files(temp_dir)
            if progress is not None:
                progress.update(STAGE_PACKAGE)
            events.info(f"Found {len(smil_paths)} SMIL files in {package_path}")

            events.emit("phase", phase="CHECK")
            result = deps.run_book_check(
                smil_paths=smil_paths,
                checker_factory=checker_factory,
                concurrency=concurrency,
                events=events,
                progress=progress,
                package_path=package_path,
            )
            events.emit(
                "done",
                files=len(result.results),
                warnings=result.warning_count,
            )
        except BaseException as exc:
            main_error = exc
            raise
        finally:
            cleanup_error = deps.cleanup_extraction_dir(temp_dir)
            if main_error is None and cleanup_error is not None:
                raise cleanup_error

    return EXIT_OK


def main(
    argv: Optional[Sequence[str]] = None,
    deps: Optional[MainDeps] = None,
) -> int:
    deps = deps or DEFAULT_MAIN_DEPS

    args = deps.parse_args(argv)
    try:
        events = deps.event_emitter_cls(
            verbose=resolve_verbose(args.verbose),
            log_file=args.log_file,
        )
    except OSError as exc:
        print(f"Cannot open log file {args.log_file}: {exc}", file=sys.stderr, flush=True)
        return EXIT_FAILURE

    try:
        try:
            concurrency = resolve_concurrency(args.concurrency)
            thresholds = deps.load_thresholds(resolve_thresholds_path(args.thresholds))
        except ValueError as exc:
            events.error(str(exc))
            return EXIT_FAILURE

        tokenizer = deps.create_tokenizer()

        def checker_factory() -> SmilChecker:
            return SmilChecker(thresholds=thresholds, tokenizer=tokenizer, events=events)

        if is_smil_path(args.input):
            checker_factory().check_smil(args.input, is_first_or_last_smil=False)
            return EXIT_OK

        return _check_epub(args, deps, events, checker_factory, concurrency)
    except SmilCheckError as exc:
        events.error(str(exc))
        return EXIT_FAILURE
    finally:
        events.close()


def run() -> None:
    sys.exit(main())
