import shutil
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set

from tqdm import tqdm

from ..exceptions import FileOperationError
from ..models import CaptureRecord, RelocationResult, RelocationStatus
from .paths import PathComposer


class Relocator:
    """
    Moves capture files into their library folder. Only ever creates
    directories and moves single files: existing destinations are left alone
    and nothing is deleted.
    """

    def __init__(self, composer: PathComposer):
        self.composer = composer
        # Directories a dry run would have created, so each is reported once
        self._planned_dirs: Set[Path] = set()

    def relocate(self, record: CaptureRecord, dry_run: bool = False) -> RelocationResult:
        src = record.source_path
        dest = self.composer.target_path(record)

        if src == dest:
            return RelocationResult(src, dest, RelocationStatus.ALREADY_ORGANIZED)

        created_dir = self._ensure_directory(dest.parent, dry_run)

        if dest.exists():
            logging.info(f"File already exists {dest}. Skipping...")
            return RelocationResult(src, dest, RelocationStatus.SKIPPED_EXISTS, created_dir,
                                    note="Destination exists")

        if dry_run:
            logging.info(f"[DRY RUN] Move {src} -> {dest}")
            return RelocationResult(src, dest, RelocationStatus.WOULD_MOVE, created_dir)

        try:
            shutil.move(str(src), str(dest))
        except OSError as e:
            raise FileOperationError(f"Failed to move {src} -> {dest}: {e}") from e

        logging.debug(f"Moved {src} -> {dest}")
        return RelocationResult(src, dest, RelocationStatus.MOVED, created_dir)

    def relocate_all(self, records: Iterable[CaptureRecord], dry_run: bool = False) -> List[RelocationResult]:
        """Relocates a whole set; a failed move is reported and the rest carry on."""
        records = list(records)
        results = []
        for record in tqdm(records, desc="Organizing", disable=dry_run or len(records) < 2):
            try:
                results.append(self.relocate(record, dry_run))
            except FileOperationError as e:
                logging.error(str(e))
                results.append(RelocationResult(
                    record.source_path, self.composer.target_path(record),
                    RelocationStatus.FAILED, note=str(e),
                ))
        return results

    def _ensure_directory(self, directory: Path, dry_run: bool) -> Optional[Path]:
        """Returns the directory if this call created it (or would have, in a dry run)."""
        if directory.exists() or directory in self._planned_dirs:
            return None

        if dry_run:
            self._planned_dirs.add(directory)
            logging.info(f"[DRY RUN] Create directory {directory}")
            return directory

        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(f"Failed to create {directory}: {e}") from e
        return directory
