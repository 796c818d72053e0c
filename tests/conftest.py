import pytest
from datetime import datetime
from pathlib import Path

from astro_organizer.config import Equipment
from astro_organizer.models import CaptureRecord, FrameType


class RecordingPrompter:
    """Scripted answers that also remember what was asked."""

    def __init__(self, move=True, dark_flats=False, telescope="RedCat51", filter="BaaderMoon", camera="T7"):
        self.move = move
        self.dark_flats = dark_flats
        self.telescope = telescope
        self.filter = filter
        self.camera = camera
        self.calls = []

    def confirm_move(self, records, current_dir, target_dir):
        self.calls.append(("confirm_move", len(records), target_dir))
        return self.move

    def confirm_dark_flats(self, records):
        self.calls.append(("confirm_dark_flats", len(records)))
        return self.dark_flats

    def select_telescope(self, records):
        self.calls.append(("select_telescope", len(records)))
        return self.telescope

    def select_filter(self, records):
        self.calls.append(("select_filter", len(records)))
        return self.filter

    def select_camera(self, records):
        self.calls.append(("select_camera", len(records)))
        return self.camera

    def asked(self, name):
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def prompter():
    return RecordingPrompter()


@pytest.fixture
def equipment():
    return Equipment()


@pytest.fixture
def make_capture(tmp_path):
    """Creates capture files under tmp_path; returns their paths."""
    def _make(*names, subdir=None, content=b"fits"):
        folder = tmp_path / subdir if subdir else tmp_path
        folder.mkdir(parents=True, exist_ok=True)
        paths = []
        for name in names:
            p = folder / name
            p.write_bytes(content)
            paths.append(p)
        return paths
    return _make


def make_record(**overrides) -> CaptureRecord:
    fields = dict(
        frame_type=FrameType.LIGHT,
        source_path=Path("Light_M51_300.0s_Bin1_ISO800_20220309-024714_6.0C_0040.fit"),
        filename="Light_M51_300.0s_Bin1_ISO800_20220309-024714_6.0C_0040.fit",
        exposure="300.0s",
        captured_at=datetime(2022, 3, 9, 2, 47, 14),
        target="M51",
        binning="1",
        iso="800",
        sensor_temp="6.0C",
        sequence_index="0040",
    )
    fields.update(overrides)
    return CaptureRecord(**fields)
