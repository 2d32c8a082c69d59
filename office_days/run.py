"""Run orchestration: walk the input directory and match every file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from pathlib import Path

from office_days.days import DaySet
from office_days.errors import DirectoryListError
from office_days.matching import FileStats, process_file
from office_days.models import DEFAULT_TOLERANCE_M, GeoPoint, TimeRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Parameters of one run."""

    input_dir: Path
    time_range: TimeRange
    reference: GeoPoint
    tolerance_m: float = DEFAULT_TOLERANCE_M
    tz: tzinfo | None = None


@dataclass(slots=True)
class RunResult:
    """Aggregate result: the shared day set plus per-file stats."""

    days: DaySet
    files: list[FileStats] = field(default_factory=list)

    @property
    def files_failed(self) -> int:
        return sum(1 for f in self.files if not f.ok)

    @property
    def places(self) -> int:
        return sum(f.places for f in self.files)


def list_files_recursively(root: str | Path) -> list[Path]:
    """List all non-directory entries below root, depth first, sorted per directory.

    Symlinks are listed as files and never followed.

    Raises:
        DirectoryListError: If root itself cannot be read. Unreadable
            sub-directories are logged and skipped.
    """

    root_path = Path(root)
    try:
        top = sorted(root_path.iterdir())
    except OSError as exc:
        raise DirectoryListError(root_path, exc) from exc

    files: list[Path] = []
    stack: list[Path] = list(reversed(top))
    while stack:
        entry = stack.pop()
        if entry.is_symlink() or not entry.is_dir():
            files.append(entry)
            continue
        try:
            children = sorted(entry.iterdir())
        except OSError as exc:
            logger.warning("Could not read directory %s: %s", entry, exc)
            continue
        stack.extend(reversed(children))
    return files


def run(config: RunConfig, *, log: logging.Logger | None = None) -> RunResult:
    """Process every file under config.input_dir against one shared DaySet."""

    log = log or logger
    result = RunResult(days=DaySet(tz=config.tz))

    try:
        paths = list_files_recursively(config.input_dir)
    except DirectoryListError as exc:
        log.error("Could not list files: %s", exc)
        paths = []

    log.debug("Found %d input files below %s", len(paths), config.input_dir)
    for path in paths:
        result.files.append(
            process_file(
                path,
                config.time_range,
                config.reference,
                config.tolerance_m,
                result.days,
                log=log,
            )
        )
    return result
