import os
import logging
from pathlib import Path
from typing import Iterator, Optional, Set

from .. import config


class CaptureScanner:
    """Finds capture files (.fit / .cr2, any case) under a library root."""

    def __init__(self, extensions: Set[str] = config.CAPTURE_EXTS):
        self.extensions = {e.lower() for e in extensions}

    def scan(self, root: Path, skip_dirs: Optional[Set[Path]] = None) -> Iterator[Path]:
        """
        Depth-first, A before Z. Directories listed in skip_dirs (and
        everything below them) are never entered.
        """
        skip_dirs = skip_dirs or set()
        if root in skip_dirs:
            return

        pending = [root]
        while pending:
            folder = pending.pop()
            try:
                with os.scandir(folder) as it:
                    entries = sorted(it, key=lambda e: e.name.lower())
            except OSError as e:
                logging.warning(f"Cannot list {folder}: {e}")
                continue

            subfolders = []
            for entry in entries:
                path = Path(entry.path)
                if entry.is_dir(follow_symlinks=False):
                    if path in skip_dirs:
                        logging.debug(f"Skipping {path}")
                    else:
                        subfolders.append(path)
                elif entry.is_file(follow_symlinks=False) and path.suffix.lower() in self.extensions:
                    yield path

            pending.extend(reversed(subfolders))
