import pytest
from datetime import datetime
from pathlib import Path

from astro_organizer.exceptions import ParseError
from astro_organizer.models import FrameType
from astro_organizer.parsing.filename import FilenameParser, TokenCursor, split_tokens


@pytest.fixture
def parser():
    return FilenameParser()


def test_parse_light(parser):
    rec = parser.parse(Path("Light_M51_300.0s_Bin1_ISO800_20220309-024714_6.0C_0040.fit"))

    assert rec.frame_type == FrameType.LIGHT
    assert rec.target == "M51"
    assert rec.mosaic_pane is None
    assert rec.exposure == "300.0s"
    assert rec.binning == "1"
    assert rec.camera is None
    assert rec.iso == "800"
    assert rec.gain is None
    assert rec.captured_at == datetime(2022, 3, 9, 2, 47, 14)
    assert rec.sensor_temp == "6.0C"
    assert rec.sequence_index == "0040"
    assert rec.filename == "Light_M51_300.0s_Bin1_ISO800_20220309-024714_6.0C_0040.fit"
    assert rec.telescope is None
    assert rec.filter is None
    assert rec.is_dark_flat is False


def test_parse_dark_with_camera_and_gain(parser):
    rec = parser.parse(Path("Dark_30.0s_Bin2_183MC_gain120_20220401-220000_-10.0C_0001.fit"))

    assert rec.frame_type == FrameType.DARK
    assert rec.target is None
    assert rec.exposure == "30.0s"
    assert rec.binning == "2"
    assert rec.camera == "183MC"
    assert rec.iso is None
    assert rec.gain == "120"
    assert rec.sensor_temp == "-10.0C"
    assert rec.sequence_index == "0001"


def test_parse_mosaic_pane(parser):
    rec = parser.parse(Path("Light_M31_1-2_120.0s_Bin1_T7_ISO400_20221001-230102_12.0C_0003.fit"))
    assert rec.target == "M31"
    assert rec.mosaic_pane == "1-2"
    assert rec.exposure == "120.0s"
    assert rec.camera == "T7"


def test_optional_fields_do_not_consume_tokens(parser):
    # No Bin token: the camera token is still picked up in its place
    rec = parser.parse(Path("Flat_500.0ms_T7_ISO100_20220310-101500_15.0C_0012.fit"))
    assert rec.binning is None
    assert rec.camera == "T7"
    assert rec.iso == "100"
    assert rec.sequence_index == "0012"


def test_unknown_camera_is_not_consumed(parser):
    # An unconfigured camera shifts into the timestamp slot, which then fails
    with pytest.raises(ParseError):
        parser.parse(Path("Dark_30.0s_Bin1_ASI2600_gain100_20220401-220000_-10.0C_0001.fit"))


def test_custom_camera_list():
    parser = FilenameParser(cameras=["ASI2600"])
    rec = parser.parse(Path("Dark_30.0s_Bin1_ASI2600_gain100_20220401-220000_-10.0C_0001.fit"))
    assert rec.camera == "ASI2600"


def test_uppercase_extension_is_stripped(parser):
    rec = parser.parse(Path("Bias_1.0ms_Bin1_T7_ISO100_20220101-120000_20.0C_0007.CR2"))
    assert rec.frame_type == FrameType.BIAS
    assert rec.sequence_index == "0007"
    assert rec.sequence_number == 7


def test_path_markers_from_organized_folder(parser):
    path = Path("lib/Flat_FLATSET_20220310_ISO_100_EXP_1.0s_Bin_1_TELESCOPE_ZhumellZ130_FILTER_NBZ_CAMERA_T7"
                "/Flat_1.0s_Bin1_ISO100_20220310-101500_15.0C_0001.fit")
    rec = parser.parse(path)
    assert rec.telescope == "ZhumellZ130"
    assert rec.filter == "NBZ"
    # Recovered from the folder when the name has no camera token
    assert rec.camera == "T7"
    assert rec.source_path == path


def test_dark_flat_marker(parser):
    path = Path("DarkFlat_FLATSET_20220310_ISO_100_EXP_1.0s_Bin_1_CAMERA_T7"
                "/Dark_1.0s_Bin1_T7_ISO100_20220310-101500_15.0C_0001.fit")
    assert parser.parse(path).is_dark_flat is True


@pytest.mark.parametrize("name", [
    "Snapshot_1.0s_Bin1_20220310-101500_15.0C_0001.fit",
    "light_M51_300.0s_Bin1_ISO800_20220309-024714_6.0C_0040.fit",
    "IMG_0042.CR2",
])
def test_unknown_type_raises(parser, name):
    with pytest.raises(ParseError) as exc:
        parser.parse(Path(name))
    assert exc.value.path == Path(name)


@pytest.mark.parametrize("name", [
    "Dark_30.0s_Bin1_ISO800_2022-03-09_6.0C_0001.fit",
    "Dark_30.0s_Bin1_ISO800.fit",
    "Dark",
])
def test_bad_or_missing_timestamp_raises(parser, name):
    with pytest.raises(ParseError):
        parser.parse(Path(name))


def test_split_tokens():
    assert split_tokens("Bias_1.0ms_0001.FIT") == ["Bias", "1.0ms", "0001"]
    assert split_tokens("Bias_1.0ms_0001.xisf") == ["Bias", "1.0ms", "0001.xisf"]


def test_token_cursor_take_if_only_advances_on_match():
    cursor = TokenCursor(["Bin1", "T7"])
    assert cursor.take_if(lambda t: t == "T7") is None
    assert cursor.peek() == "Bin1"
    assert cursor.take_prefixed("Bin") == "1"
    assert cursor.take() == "T7"
    assert cursor.take() is None
    assert cursor.take_if(lambda t: True) is None


def test_markers_only_read_below_root(tmp_path):
    root = tmp_path / "DarkFlat_inbox" / "TELESCOPE_MeadeDS90_FILTER_NBZ_CAMERA_183MC"
    path = root / "Dark_60.0s_Bin1_ISO800_20220310-040000_5.0C_0001.fit"

    rec = FilenameParser(root=root).parse(path)

    assert rec.is_dark_flat is False
    assert rec.telescope is None
    assert rec.filter is None
    assert rec.camera is None
    assert rec.source_path == path


def test_markers_below_root_still_count(tmp_path):
    root = tmp_path / "DarkFlat_inbox"
    path = root / "DarkFlat_FLATSET_20220310_ISO_100_EXP_1.0s_Bin_1_CAMERA_T7" / \
        "Dark_1.0s_Bin1_ISO100_20220310-101500_15.0C_0001.fit"

    rec = FilenameParser(root=root).parse(path)

    assert rec.is_dark_flat is True
    assert rec.camera == "T7"


def test_path_outside_root_uses_full_path(tmp_path):
    path = Path("elsewhere/TELESCOPE_RedCat51/Flat_1.0s_Bin1_ISO100_20220310-101500_15.0C_0001.fit")
    rec = FilenameParser(root=tmp_path).parse(path)
    assert rec.telescope == "RedCat51"
