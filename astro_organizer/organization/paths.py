from pathlib import Path
from typing import List, Optional

from .. import config
from ..models import CaptureRecord, FrameType


def _field(label: str, value: Optional[str]) -> str:
    return f"{label}_{value if value is not None else ''}"


class PathComposer:
    """
    Maps a capture record to its folder in the library. Folder names carry
    the grouping keywords PixInsight's WBPP script picks up (FLATSET, EXP,
    ISO/GAIN, Bin, CCD-TEMP, TELESCOPE, FILTER, CAMERA, MONTH).

    Everything here is a pure function of the record's fields.
    """

    def __init__(self, root: Path = Path('.')):
        self.root = Path(root)

    def directory_name(self, record: CaptureRecord) -> str:
        parts = self._segments(record)
        return config.TOKEN_SEP.join(parts)

    def target_directory(self, record: CaptureRecord) -> Path:
        return self.root / self.directory_name(record)

    def target_path(self, record: CaptureRecord) -> Path:
        return self.target_directory(record) / record.filename

    def is_organized(self, record: CaptureRecord) -> bool:
        return record.source_path == self.target_path(record)

    def _segments(self, record: CaptureRecord) -> List[str]:
        iso_or_gain = self._iso_or_gain(record)
        exposure = _field('EXP', record.exposure)
        binning = _field('Bin', record.binning)
        camera = _field('CAMERA', record.camera)
        equipment = [_field('TELESCOPE', record.telescope), _field('FILTER', record.filter)]

        if record.frame_type == FrameType.DARK:
            if record.is_dark_flat:
                return ['DarkFlat', _field('FLATSET', record.flatset_id()), *iso_or_gain,
                        exposure, binning, camera]
            return ['Dark', *iso_or_gain, exposure, _field('CCD-TEMP', record.sensor_temp),
                    camera, _field('MONTH', record.month_key())]

        if record.frame_type == FrameType.FLAT:
            return ['Flat', _field('FLATSET', record.flatset_id()), *iso_or_gain,
                    exposure, binning, *equipment, camera]

        if record.frame_type == FrameType.LIGHT:
            parts = ['Light', record.target or '']
            if record.mosaic_pane:
                parts.append(_field('PANE', record.mosaic_pane))
            parts += [_field('FLATSET', record.flatset_id()), *iso_or_gain, exposure, binning]
            if record.is_legacy_format:
                temp = (record.sensor_temp or '').removesuffix(config.LEGACY_TEMP_SUFFIX)
                parts.append(_field('CCD-TEMP', temp))
            return parts + [*equipment, camera]

        # Bias
        return ['Bias', *iso_or_gain, exposure, binning, camera, _field('MONTH', record.month_key())]

    @staticmethod
    def _iso_or_gain(record: CaptureRecord) -> List[str]:
        if record.iso is not None:
            return [_field('ISO', record.iso)]
        if record.gain is not None:
            return [_field('GAIN', record.gain)]
        return []
