from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from .checker import CheckerFactory
from .events import EventEmitter
from .models import BookCheckResult, SmilCheckResult
from .progress import STAGE_CHECK, StageProgress


def plan_smil_checks(smil_paths: Sequence[str]) -> List[Tuple[str, bool]]:
    """Pair each SMIL path with whether it is the first or last overlay of the book."""
    last_idx = len(smil_paths) - 1
    return [
        (path, idx == 0 or idx == last_idx) for idx, path in enumerate(smil_paths)
    ]


def run_book_check(
    *,
    smil_paths: Sequence[str],
    checker_factory: CheckerFactory,
    concurrency: int = 1,
    events: Optional[EventEmitter] = None,
    progress: Optional[StageProgress] = None,
    package_path: Optional[str] = None,
) -> BookCheckResult:
    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")

    plan = plan_smil_checks(smil_paths)
    total_files = len(plan)
    completed_files = 0

    def mark_completed() -> None:
        nonlocal completed_files
        completed_files += 1
        if progress is not None:
            progress.update(STAGE_CHECK, completed_files, total_files)
        if events is not None:
            events.emit(
                "progress",
                current_file=completed_files,
                total_files=total_files,
            )

    def check_one(path: str, is_first_or_last_smil: bool) -> SmilCheckResult:
        return checker_factory().check_smil(path, is_first_or_last_smil)

    results: List[SmilCheckResult] = []
    if concurrency == 1:
        for path, is_first_or_last_smil in plan:
            results.append(check_one(path, is_first_or_last_smil))
            mark_completed()
    else:
        with ThreadPoolExecutor(
            max_workers=concurrency, thread_name_prefix="smilcheck"
        ) as executor:
            futures = [
                executor.submit(check_one, path, is_first_or_last_smil)
                for path, is_first_or_last_smil in plan
            ]
            for future in futures:
                results.append(future.result())
                mark_completed()

    return BookCheckResult(
        smil_paths=list(smil_paths),
        results=results,
        package_path=package_path,
    )
