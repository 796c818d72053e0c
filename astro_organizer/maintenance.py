"""
Cleanup steps to run after moving previously organized data around.
Both honour dry run by only logging what they would delete.
"""
import logging
import os
from pathlib import Path
from typing import List

from . import config


def remove_jpg_thumbnails(root: Path, dry_run: bool = False) -> List[Path]:
    """Removes the ASIAir *_thn.jpg previews under root."""
    logging.info("Removing jpg thumbnails...")
    removed = []
    for thumb in sorted(root.rglob(f"*{config.THUMBNAIL_SUFFIX}")):
        if not thumb.is_file():
            continue
        if dry_run:
            logging.info(f"[DRY RUN] rm {thumb}")
        else:
            thumb.unlink()
            logging.info(f"rm {thumb}")
        removed.append(thumb)
    return removed


def remove_empty_directories(root: Path, dry_run: bool = False) -> List[Path]:
    """
    Deletes junk files (.DS_Store) below root, then every directory left
    empty, deepest first. The root itself is kept.
    """
    logging.info("Cleaning up empty directories...")
    removed = []
    # Paths a dry run pretends are gone, so parents of empty dirs count as empty too
    gone = set()

    for dirpath, dirnames, filenames in os.walk(root, topdown=False):
        current = Path(dirpath)
        if current == root:
            continue

        for name in filenames:
            if name in config.JUNK_FILES:
                junk = current / name
                if dry_run:
                    logging.info(f"[DRY RUN] rm {junk}")
                else:
                    junk.unlink()
                    logging.info(f"rm {junk}")
                gone.add(junk)

        remaining = [p for p in current.iterdir() if p not in gone]
        if remaining:
            continue

        if dry_run:
            logging.info(f"[DRY RUN] rmdir {current}")
        else:
            current.rmdir()
            logging.info(f"rmdir {current}")
        gone.add(current)
        removed.append(current)

    return removed
