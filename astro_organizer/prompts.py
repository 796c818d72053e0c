"""
Operator answers needed while organizing a capture set.

The workflow only talks to a SetPrompter, so the same code runs against the
terminal (ConsolePrompter) or a fixed set of answers (ScriptedPrompter).
"""
import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence

import click

from .config import Equipment
from .models import CaptureRecord


class SetPrompter(Protocol):
    def confirm_move(self, records: Sequence[CaptureRecord], current_dir: Path, target_dir: Path) -> bool: ...

    def confirm_dark_flats(self, records: Sequence[CaptureRecord]) -> bool: ...

    def select_telescope(self, records: Sequence[CaptureRecord]) -> str: ...

    def select_filter(self, records: Sequence[CaptureRecord]) -> str: ...

    def select_camera(self, records: Sequence[CaptureRecord]) -> str: ...


class ConsolePrompter:
    """Asks on the terminal through click."""

    def __init__(self, equipment: Equipment):
        self.equipment = equipment

    def confirm_move(self, records, current_dir, target_dir):
        return click.confirm(f"Do you want to move the set in {current_dir} to {target_dir}?")

    def confirm_dark_flats(self, records):
        return click.confirm(f"Is this a flat dark set (size {len(records)})? {records[0].filename}")

    def select_telescope(self, records):
        self._announce(records)
        return self._choose('What telescope is this set for?',
                            self.equipment.telescopes, self.equipment.default_telescope)

    def select_filter(self, records):
        return self._choose('What filter is used with this set?',
                            self.equipment.filters, self.equipment.default_filter)

    def select_camera(self, records):
        return self._choose('What camera is used with this set?',
                            self.equipment.cameras, self.equipment.default_camera)

    @staticmethod
    def _announce(records):
        click.echo(f"For {records[0].filename}..{records[-1].filename}:")

    @staticmethod
    def _choose(prompt: str, choices: Sequence[str], default: str) -> str:
        return click.prompt(prompt, type=click.Choice(list(choices)), default=default)


class ScriptedPrompter:
    """
    Fixed answers for unattended runs. Unset equipment answers fall back to
    the catalogue defaults.
    """

    def __init__(self,
                 equipment: Equipment,
                 move: bool = True,
                 dark_flats: bool = False,
                 telescope: Optional[str] = None,
                 filter: Optional[str] = None,
                 camera: Optional[str] = None):
        self.move = move
        self.dark_flats = dark_flats
        self.telescope = telescope or equipment.default_telescope
        self.filter = filter or equipment.default_filter
        self.camera = camera or equipment.default_camera

    def confirm_move(self, records, current_dir, target_dir):
        logging.info(f"Set in {current_dir} -> {target_dir}: {'moving' if self.move else 'skipping'}")
        return self.move

    def confirm_dark_flats(self, records):
        return self.dark_flats

    def select_telescope(self, records):
        return self.telescope

    def select_filter(self, records):
        return self.filter

    def select_camera(self, records):
        return self.camera
