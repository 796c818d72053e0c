"""
Custom exception hierarchy for the astro organizer.

Parse failures are raised per file so a run can report and skip them
without halting the rest of the batch.
"""


class AstroOrganizerError(Exception):
    """Base exception for all astro organizer errors."""
    pass


class ParseError(AstroOrganizerError):
    """Raised when a capture filename does not follow the expected grammar."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse {path}: {reason}")


class UnrecognizedExposureUnitError(AstroOrganizerError):
    """Raised when an exposure token has a unit other than s, ms or us."""
    pass


class FileOperationError(AstroOrganizerError):
    """Raised when a directory creation or move fails."""
    pass


class EquipmentConfigError(AstroOrganizerError):
    """Raised when the equipment catalogue cannot be loaded."""
    pass
