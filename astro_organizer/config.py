"""
Configuration constants for the astro organizer.
"""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .exceptions import EquipmentConfigError

# --- Equipment ---
# Add your gear here. Telescope and filter are asked for flats and lights,
# camera only when none of the files in a set carries one.
TELESCOPES = ('RedCat51', 'ZhumellZ130', 'AperturaAD8', 'MeadeDS90')
FILTERS = ('BaaderMoon', 'NBZ', 'NoFilter')
CAMERAS = ('T7', '183MC')

DEFAULT_TELESCOPE = 'RedCat51'
DEFAULT_FILTER = 'BaaderMoon'
DEFAULT_CAMERA = 'T7'

# --- File Type Definitions ---
FITS_EXT = '.fit'
CR2_EXT = '.cr2'
CAPTURE_EXTS = {FITS_EXT, CR2_EXT}

# CR2 lights carry the sensor temperature in their folder name
LEGACY_TEMP_EXT = CR2_EXT
LEGACY_TEMP_SUFFIX = '0C'

# --- Filename Grammar ---
TOKEN_SEP = '_'
DT_FORMAT = '%Y%m%d-%H%M%S'
PANE_PATTERN = r'^\d+-\d+$'
BIN_PREFIX = 'Bin'
ISO_PREFIX = 'ISO'
GAIN_PREFIX = 'gain'

# Markers left in the path by a previous organizing run
TELESCOPE_MARKER = r'TELESCOPE_([^_/]+)'
FILTER_MARKER = r'FILTER_([^_/]+)'
CAMERA_MARKER = r'CAMERA_([^_/]+)'
DARK_FLAT_MARKER = 'DarkFlat'

# --- Classification ---
DARK_FLAT_MAX_EXPOSURE = 10.0  # seconds
EXPOSURE_UNITS = {
    's': 1.0,
    'ms': 1 / 1000.0,
    'us': 1 / 1_000_000.0,
}

# --- Cleanup ---
THUMBNAIL_SUFFIX = '_thn.jpg'
JUNK_FILES = {'.DS_Store'}


@dataclass(frozen=True)
class Equipment:
    telescopes: Tuple[str, ...] = TELESCOPES
    filters: Tuple[str, ...] = FILTERS
    cameras: Tuple[str, ...] = CAMERAS
    default_telescope: str = DEFAULT_TELESCOPE
    default_filter: str = DEFAULT_FILTER
    default_camera: str = DEFAULT_CAMERA


def load_equipment(path: Optional[Path]) -> Equipment:
    """
    Reads an equipment catalogue from JSON, e.g.
    {"telescopes": ["RedCat51"], "filters": ["NBZ"], "cameras": ["183MC"]}.
    Missing keys keep the built-in lists. The first entry becomes the default.
    """
    if path is None:
        return Equipment()

    try:
        with path.open('r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise EquipmentConfigError(f"Cannot read equipment file {path}: {e}") from e

    if not isinstance(data, dict):
        raise EquipmentConfigError(f"Equipment file {path} must contain a JSON object")

    lists = {}
    for key, fallback in (('telescopes', TELESCOPES), ('filters', FILTERS), ('cameras', CAMERAS)):
        values = data.get(key)
        if values is None:
            lists[key] = fallback
            continue
        if not isinstance(values, list) or not values or not all(isinstance(v, str) and v for v in values):
            raise EquipmentConfigError(f"'{key}' in {path} must be a non-empty list of names")
        lists[key] = tuple(values)

    return Equipment(
        telescopes=lists['telescopes'],
        filters=lists['filters'],
        cameras=lists['cameras'],
        default_telescope=lists['telescopes'][0],
        default_filter=lists['filters'][0],
        default_camera=lists['cameras'][0],
    )
