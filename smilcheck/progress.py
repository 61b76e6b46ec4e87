from dataclasses import dataclass
from typing import Optional, Tuple

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
)


@dataclass(frozen=True)
class ProcessingStage:
    name: str
    percent_of_total: float


STAGE_UNZIP = ProcessingStage("unzip", 5.0)
STAGE_PACKAGE = ProcessingStage("package", 5.0)
STAGE_CHECK = ProcessingStage("check", 90.0)

PROCESSING_STAGES: Tuple[ProcessingStage, ...] = (
    STAGE_UNZIP,
    STAGE_PACKAGE,
    STAGE_CHECK,
)


def stage_offset(stage: ProcessingStage) -> float:
    """Percent of the run completed before the given stage starts."""
    offset = 0.0
    for candidate in PROCESSING_STAGES:
        if candidate == stage:
            return offset
        offset += candidate.percent_of_total
    raise ValueError(f"Unknown processing stage: {stage.name}")


class StageProgress:
    """Drive one rich progress bar across the processing stages."""

    def __init__(self, progress: Optional[Progress] = None):
        self.progress = progress or Progress(
            TextColumn("[bold]{task.description}[/bold]"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=Console(stderr=True),
        )
        self.task_id = self.progress.add_task("smilcheck", total=100.0, completed=0.0)

    def __enter__(self) -> "StageProgress":
        self.progress.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.progress.stop()

    def update(self, stage: ProcessingStage, done: int = 1, total: int = 1) -> None:
        fraction = done / total if total > 0 else 1.0
        self.progress.update(
            self.task_id,
            description=stage.name,
            completed=stage_offset(stage) + stage.percent_of_total * fraction,
        )
