import logging
import re
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import Optional

from . import config
from .exceptions import UnrecognizedExposureUnitError

_EXPOSURE_RE = re.compile(r'^(\d+(?:\.\d+)?)([A-Za-z]+)$')
_LEADING_DIGITS_RE = re.compile(r'^\d+')


class FrameType(str, Enum):
    DARK = 'Dark'
    FLAT = 'Flat'
    LIGHT = 'Light'
    BIAS = 'Bias'


@dataclass(frozen=True)
class SetContext:
    """
    Answers collected for a whole capture set before it is moved.
    None means "leave the parsed value alone".
    """
    telescope: Optional[str] = None
    filter: Optional[str] = None
    camera: Optional[str] = None
    is_dark_flat: Optional[bool] = None


@dataclass(frozen=True)
class CaptureRecord:
    """
    One capture file as described by its name and, for files that were
    organized before, by the markers in its path.
    """
    frame_type: FrameType
    source_path: Path
    filename: str
    exposure: str
    captured_at: datetime

    target: Optional[str] = None
    mosaic_pane: Optional[str] = None
    telescope: Optional[str] = None
    filter: Optional[str] = None
    is_dark_flat: bool = False
    binning: Optional[str] = None
    camera: Optional[str] = None
    iso: Optional[str] = None
    gain: Optional[str] = None
    sensor_temp: Optional[str] = None
    sequence_index: Optional[str] = None

    @property
    def sequence_number(self) -> int:
        """Integer value of the sequence token; 0 when it has no leading digits."""
        if not self.sequence_index:
            return 0
        m = _LEADING_DIGITS_RE.match(self.sequence_index)
        return int(m.group()) if m else 0

    @property
    def current_dir(self) -> Path:
        return self.source_path.parent

    @property
    def is_legacy_format(self) -> bool:
        return self.filename.lower().endswith(config.LEGACY_TEMP_EXT)

    def exposure_seconds(self) -> float:
        m = _EXPOSURE_RE.match(self.exposure or '')
        if not m or m.group(2) not in config.EXPOSURE_UNITS:
            raise UnrecognizedExposureUnitError(
                f"Unrecognized exposure '{self.exposure}' in {self.filename}"
            )
        return float(m.group(1)) * config.EXPOSURE_UNITS[m.group(2)]

    def is_dark_flat_candidate(self) -> bool:
        """True if this dark is short enough to be a flat dark and isn't filed as one yet."""
        if self.frame_type != FrameType.DARK or self.is_dark_flat:
            return False
        try:
            seconds = self.exposure_seconds()
        except UnrecognizedExposureUnitError as e:
            logging.warning(f"{e}. Not considering it as a dark flat.")
            return False
        return seconds <= config.DARK_FLAT_MAX_EXPOSURE

    def flatset_id(self) -> str:
        """
        Capture date as YYYYMMDD. Lights shot in the afternoon or evening
        belong to the flatset taken the next day.
        """
        day = self.captured_at
        if self.frame_type == FrameType.LIGHT and day.hour >= 12:
            day = day + timedelta(days=1)
        return day.strftime('%Y%m%d')

    def month_key(self) -> str:
        """Capture month as YYYY-MM, used to bucket darks and biases by season."""
        return self.captured_at.strftime('%Y-%m')

    def enriched(self, context: SetContext) -> 'CaptureRecord':
        """Returns a copy with the set-level answers applied."""
        changes = {}
        if context.telescope is not None:
            changes['telescope'] = context.telescope
        if context.filter is not None:
            changes['filter'] = context.filter
        if context.camera is not None and self.camera is None:
            changes['camera'] = context.camera
        if context.is_dark_flat:
            changes['is_dark_flat'] = True
        return replace(self, **changes) if changes else self


class RelocationStatus(str, Enum):
    ALREADY_ORGANIZED = 'Already Organized'
    MOVED = 'Moved'
    WOULD_MOVE = 'Would Move'
    SKIPPED_EXISTS = 'Skipped (Exists)'
    FAILED = 'Failed'


@dataclass
class RelocationResult:
    source: Path
    destination: Path
    status: RelocationStatus
    created_dir: Optional[Path] = None
    note: str = ''
