"""
Parser for ASIAir capture filenames.

    <Type>[_<Target>][_<Pane>]_<Exposure>[_Bin<N>][_<Camera>][_ISO<N>|_gain<N>]_<YYYYMMDD-HHMMSS>_<Temp>_<Seq>

Tokens are consumed left to right. Optional fields only consume the next
token when it has the expected shape, so a missing optional field leaves the
token for the next step. Nothing checks that every token was used.
"""
import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from .. import config
from ..exceptions import ParseError
from ..models import CaptureRecord, FrameType

_PANE_RE = re.compile(config.PANE_PATTERN)
_TELESCOPE_RE = re.compile(config.TELESCOPE_MARKER)
_FILTER_RE = re.compile(config.FILTER_MARKER)
_CAMERA_RE = re.compile(config.CAMERA_MARKER)

_FRAME_TYPES = {t.value: t for t in FrameType}


class TokenCursor:
    """Read position over an immutable token list."""

    def __init__(self, tokens: Sequence[str]):
        self._tokens = tuple(tokens)
        self._pos = 0

    def peek(self) -> Optional[str]:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def take(self) -> Optional[str]:
        token = self.peek()
        if token is not None:
            self._pos += 1
        return token

    def take_if(self, predicate: Callable[[str], bool]) -> Optional[str]:
        """Consumes the next token only when the predicate accepts it."""
        token = self.peek()
        if token is None or not predicate(token):
            return None
        self._pos += 1
        return token

    def take_prefixed(self, prefix: str) -> Optional[str]:
        token = self.take_if(lambda t: t.startswith(prefix))
        return token[len(prefix):] if token is not None else None


def split_tokens(filename: str) -> list:
    """Strips a known capture extension and splits on the token separator."""
    stem = filename
    suffix = Path(filename).suffix
    if suffix.lower() in config.CAPTURE_EXTS:
        stem = filename[:-len(suffix)]
    return stem.split(config.TOKEN_SEP)


class FilenameParser:
    def __init__(self, cameras: Iterable[str] = config.CAMERAS, root: Optional[Path] = None):
        self.cameras = frozenset(cameras)
        # Markers are only looked for below the library root
        self.root = Path(root) if root is not None else None

    def parse(self, path: Path) -> CaptureRecord:
        path = Path(path)
        filename = path.name
        cursor = TokenCursor(split_tokens(filename))

        type_token = cursor.take()
        frame_type = _FRAME_TYPES.get(type_token)
        if frame_type is None:
            raise ParseError(path, f"unknown frame type '{type_token}'")

        target = cursor.take() if frame_type == FrameType.LIGHT else None
        mosaic_pane = cursor.take_if(lambda t: bool(_PANE_RE.match(t)))

        # Already organized files carry these in their directory names
        library_path = self._library_relative(path)
        path_str = library_path.as_posix()
        telescope = self._search(_TELESCOPE_RE, path_str)
        filter_name = self._search(_FILTER_RE, path_str)
        is_dark_flat = config.DARK_FLAT_MARKER in path_str

        exposure = cursor.take()
        if not exposure:
            raise ParseError(path, "missing exposure")

        binning = cursor.take_prefixed(config.BIN_PREFIX)
        camera = cursor.take_if(lambda t: t in self.cameras)
        if camera is None:
            camera = self._search(_CAMERA_RE, library_path.parent.as_posix())
        iso = cursor.take_prefixed(config.ISO_PREFIX)
        gain = cursor.take_prefixed(config.GAIN_PREFIX)

        dt_token = cursor.take()
        if dt_token is None:
            raise ParseError(path, "missing capture timestamp")
        try:
            captured_at = datetime.strptime(dt_token, config.DT_FORMAT)
        except ValueError:
            raise ParseError(path, f"bad capture timestamp '{dt_token}'") from None

        sensor_temp = cursor.take()
        sequence_index = cursor.take()

        return CaptureRecord(
            frame_type=frame_type,
            source_path=path,
            filename=filename,
            exposure=exposure,
            captured_at=captured_at,
            target=target,
            mosaic_pane=mosaic_pane,
            telescope=telescope,
            filter=filter_name,
            is_dark_flat=is_dark_flat,
            binning=binning,
            camera=camera,
            iso=iso,
            gain=gain,
            sensor_temp=sensor_temp,
            sequence_index=sequence_index,
        )

    def _library_relative(self, path: Path) -> Path:
        if self.root is None:
            return path
        try:
            return path.relative_to(self.root)
        except ValueError:
            return path

    @staticmethod
    def _search(pattern: re.Pattern, text: str) -> Optional[str]:
        m = pattern.search(text)
        return m.group(1) if m else None
