"""
Renames DSLR raw files shot outside the ASIAir so they follow its naming
pattern and can be organized like everything else.

Reading the EXIF block is left to the caller: it hands over a CaptureExif
per file.
"""
import logging
import re
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from . import config
from .exceptions import AstroOrganizerError
from .models import FrameType

RAW_NAME_EXT = '.CR2'
_TRAILING_NUMBER_RE = re.compile(r'(\d+)$')


@dataclass(frozen=True)
class CaptureExif:
    exposure_time: float  # seconds
    captured_at: datetime
    camera_temperature: float
    sequence_number: int
    model: str
    iso: int


def format_exposure(seconds: float) -> str:
    """0.5 -> '500.0ms', 0.0002 -> '200.0us', 30 -> '30.0s'."""
    value, unit = seconds, 's'
    if value < 1.0:
        value, unit = value * 1000, 'ms'
    if value < 1.0:
        value, unit = value * 1000, 'us'
    return f"{value:.1f}{unit}"


def match_camera(model: str, cameras: Sequence[str] = config.CAMERAS) -> Optional[str]:
    """First configured camera identifier that appears in the EXIF model string."""
    return next((cam for cam in cameras if cam in model), None)


def trailing_number(path: Path) -> Optional[int]:
    """IMG_0042.CR2 -> 42."""
    m = _TRAILING_NUMBER_RE.search(re.split(r'[_-]', path.stem)[-1])
    return int(m.group(1)) if m else None


def compose_capture_filename(frame_type: FrameType,
                             exif: CaptureExif,
                             camera: str,
                             target: Optional[str] = None) -> str:
    parts = [frame_type.value]
    if target:
        parts.append(target)
    parts += [
        format_exposure(exif.exposure_time),
        f"{config.BIN_PREFIX}1",
        camera,
        f"{config.ISO_PREFIX}{exif.iso}",
        exif.captured_at.strftime(config.DT_FORMAT),
        f"{exif.camera_temperature:.1f}C",
        f"{exif.sequence_number:04d}",
    ]
    return config.TOKEN_SEP.join(parts) + RAW_NAME_EXT


def rename_from_exif(paths: Iterable[Path],
                     frame_type: FrameType,
                     read_exif: Callable[[Path], CaptureExif],
                     choose_camera: Callable[[str], str],
                     target: Optional[str] = None,
                     cameras: Sequence[str] = config.CAMERAS,
                     dry_run: bool = False) -> List[Path]:
    """
    Renames each file in place. choose_camera is asked when the EXIF model
    matches none of the configured cameras, and must answer with one of them
    so the new name parses back. Existing names are never overwritten.
    Returns the new paths.
    """
    renamed = []
    for path in paths:
        exif = read_exif(path)
        if exif.sequence_number == 0:
            exif = CaptureExif(
                exif.exposure_time, exif.captured_at, exif.camera_temperature,
                trailing_number(path) or 0, exif.model, exif.iso,
            )

        camera = match_camera(exif.model, cameras)
        if camera is None:
            logging.warning(f"Camera {exif.model} did not match any of the expected models.")
            camera = choose_camera(exif.model)
            if camera not in cameras:
                raise AstroOrganizerError(
                    f"Camera '{camera}' for {path.name} is not one of: {', '.join(cameras)}"
                )

        new_path = path.with_name(compose_capture_filename(frame_type, exif, camera, target))
        if _rename(path, new_path, dry_run):
            renamed.append(new_path)
    return renamed


def rename_to_img(paths: Sequence[Path], dry_run: bool = False) -> List[Path]:
    """Reverts files to the camera's IMG_####.CR2 names."""
    renamed = []
    for index, path in enumerate(paths):
        seq = trailing_number(path)
        new_path = path.with_name(f"IMG_{seq if seq is not None else index:04d}{RAW_NAME_EXT}")
        if _rename(path, new_path, dry_run):
            renamed.append(new_path)
    return renamed


def _rename(src: Path, dest: Path, dry_run: bool) -> bool:
    if src == dest:
        return False
    if dest.exists():
        logging.info(f"File already exists {dest}. Skipping...")
        return False
    if dry_run:
        logging.info(f"[DRY RUN] Rename {src} -> {dest}")
    else:
        shutil.move(str(src), str(dest))
        logging.info(f"Renamed {src.name} -> {dest.name}")
    return True
