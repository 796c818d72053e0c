import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set

from .config import Equipment
from .exceptions import ParseError
from .models import CaptureRecord, FrameType, RelocationResult, SetContext
from .organization.grouping import group_capture_sets
from .organization.mover import Relocator
from .organization.paths import PathComposer
from .parsing.filename import FilenameParser
from .prompts import SetPrompter
from .scanning.filesystem import CaptureScanner

ORGANIZE_ORDER = (FrameType.DARK, FrameType.FLAT, FrameType.LIGHT, FrameType.BIAS)


class AstroOrganizerApp:
    def __init__(self,
                 root: Path,
                 prompter: SetPrompter,
                 equipment: Optional[Equipment] = None,
                 dry_run: bool = False,
                 skip_dirs: Optional[Set[Path]] = None):
        self.root = Path(root)
        self.skip_dirs = skip_dirs or set()
        self.prompter = prompter
        self.equipment = equipment or Equipment()
        self.dry_run = dry_run

        self.parser = FilenameParser(self.equipment.cameras, self.root)
        self.composer = PathComposer(self.root)
        self.relocator = Relocator(self.composer)
        self.parse_errors: List[ParseError] = []

    def discover(self) -> List[Path]:
        return list(CaptureScanner().scan(self.root, self.skip_dirs))

    def load_records(self, paths: Iterable[Path]) -> List[CaptureRecord]:
        """Parses every path; names that don't parse are logged and left out."""
        records = []
        for path in paths:
            try:
                records.append(self.parser.parse(path))
            except ParseError as e:
                logging.error(f"{e}. Skipping.")
                self.parse_errors.append(e)
        return records

    def organize_all(self,
                     frame_types: Sequence[FrameType] = ORGANIZE_ORDER,
                     paths: Optional[Iterable[Path]] = None) -> List[RelocationResult]:
        records = self.load_records(self.discover() if paths is None else paths)
        results = []
        for frame_type in frame_types:
            results.extend(self._organize_records(frame_type, records))
        return results

    def organize(self, frame_type: FrameType, paths: Optional[Iterable[Path]] = None) -> List[RelocationResult]:
        """
        Organizes every capture set of one frame type.
        1. Group (sorted by path, split on sequence resets)
        2. Confirm (move, and dark flat reclassification for darks)
        3. Enrich (telescope/filter for flats and lights, missing camera)
        4. Relocate
        """
        records = self.load_records(self.discover() if paths is None else paths)
        return self._organize_records(frame_type, records)

    def _organize_records(self, frame_type: FrameType, records: List[CaptureRecord]) -> List[RelocationResult]:
        selected = sorted((r for r in records if r.frame_type == frame_type),
                          key=lambda r: r.source_path.as_posix())
        logging.info(f"Preparing to move {len(selected)} {frame_type.value.upper()} files...")

        results = []
        for capture_set in group_capture_sets(selected):
            results.extend(self.organize_set(capture_set))

        logging.info("Done")
        return results

    def organize_set(self, capture_set: Sequence[CaptureRecord]) -> List[RelocationResult]:
        composer = self.composer
        organized = [composer.is_organized(r) for r in capture_set]
        if all(organized):
            return []

        first = capture_set[0]
        if not any(organized):
            target_dir = composer.target_directory(first)
            if not self.prompter.confirm_move(capture_set, first.current_dir, target_dir):
                logging.info(f"Skipping set in {first.current_dir}")
                return []

        frame_type = first.frame_type
        is_dark_flat = None
        if frame_type == FrameType.DARK and all(r.is_dark_flat_candidate() for r in capture_set):
            if self.prompter.confirm_dark_flats(capture_set):
                logging.info("Moving the set to a FLATSET directory...")
                is_dark_flat = True

        telescope = filter_name = None
        if frame_type in (FrameType.FLAT, FrameType.LIGHT):
            telescope = self.prompter.select_telescope(capture_set)
            filter_name = self.prompter.select_filter(capture_set)

        context = SetContext(
            telescope=telescope,
            filter=filter_name,
            camera=self._resolve_camera(capture_set),
            is_dark_flat=is_dark_flat,
        )
        enriched = [r.enriched(context) for r in capture_set]
        return self.relocator.relocate_all(enriched, self.dry_run)

    def _resolve_camera(self, capture_set: Sequence[CaptureRecord]) -> Optional[str]:
        cameras = sorted({r.camera for r in capture_set if r.camera})
        if not cameras:
            logging.warning("Camera not detected.")
            camera = self.prompter.select_camera(capture_set)
            logging.info(f"Using {camera}.")
            return camera
        if len(cameras) > 1:
            logging.warning(f"Multiple cameras detected: {cameras}")
            return None
        return cameras[0]
