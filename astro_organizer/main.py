import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Set

from .config import CR2_EXT, load_equipment
from .core import AstroOrganizerApp, ORGANIZE_ORDER
from .exceptions import AstroOrganizerError
from .maintenance import remove_empty_directories, remove_jpg_thumbnails
from .models import FrameType
from .prompts import ConsolePrompter, ScriptedPrompter
from .renaming import rename_to_img
from .reporting import ReportGenerator

TYPE_CHOICES = {
    'darks': FrameType.DARK,
    'flats': FrameType.FLAT,
    'lights': FrameType.LIGHT,
    'biases': FrameType.BIAS,
}


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, if asked, to a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
    )


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Astro Organizer: file ASIAir captures into WBPP-friendly folders")

    p.add_argument("root", type=Path, help="Library root to organize (files are moved within it)")
    p.add_argument("types", nargs="*", type=str.lower, metavar="TYPE",
                   help="Frame types to organize: darks, flats, lights, biases (default: all)")

    p.add_argument("--dry-run", action="store_true", help="Simulate actions without modifying disk")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    p.add_argument("--equipment", type=Path, default=None,
                   help="JSON file listing telescopes, filters and cameras")
    p.add_argument("--report-csv", type=Path, default=None, help="Write a CSV of every planned/performed move")
    p.add_argument("--skip-dirs-file", type=Path, default=None,
                   help="File listing directories (relative to root or absolute) to leave alone")

    # Unattended answers
    p.add_argument("--yes", action="store_true",
                   help="Run unattended: move every set. Implied by any of the answers below")
    p.add_argument("--dark-flats", action="store_true", help="Treat short dark sets as flat darks")
    p.add_argument("--telescope", default=None, help="Telescope for flats and lights")
    p.add_argument("--filter", default=None, help="Filter for flats and lights")
    p.add_argument("--camera", default=None, help="Camera for sets without one in their names")

    # Post-steps
    p.add_argument("--clean-thumbnails", action="store_true", help="Remove *_thn.jpg previews")
    p.add_argument("--clean-empty-dirs", action="store_true", help="Remove empty directories afterwards")
    p.add_argument("--rename-to-img", action="store_true",
                   help="Only rename the .cr2 files directly in root back to IMG_####.CR2, then stop")

    args = p.parse_args(argv)
    unknown = [t for t in args.types if t not in TYPE_CHOICES]
    if unknown:
        p.error(f"unknown frame type(s): {', '.join(unknown)}")
    return args


def load_skip_dirs(skip_file: Path, root: Path) -> Set[Path]:
    if not skip_file or not skip_file.exists():
        return set()

    skips = set()
    with skip_file.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                p = Path(line)
                skips.add(p if p.is_absolute() else root / p)
    return skips


def raw_files_in(directory: Path):
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == CR2_EXT)


def build_prompter(args, equipment):
    scripted = args.yes or args.dark_flats or args.telescope or args.filter or args.camera
    if not scripted:
        return ConsolePrompter(equipment)

    for value, allowed, label in ((args.telescope, equipment.telescopes, "telescope"),
                                  (args.filter, equipment.filters, "filter"),
                                  (args.camera, equipment.cameras, "camera")):
        if value is not None and value not in allowed:
            raise AstroOrganizerError(f"Unknown {label} '{value}'. Choose from: {', '.join(allowed)}")

    return ScriptedPrompter(
        equipment,
        dark_flats=args.dark_flats,
        telescope=args.telescope,
        filter=args.filter,
        camera=args.camera,
    )


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    root = args.root
    if not root.is_dir():
        logging.error(f"Library root {root} is not a directory.")
        sys.exit(1)

    logging.info("=== Astro Organizer Started ===")
    logging.info(f"Root: {root.resolve()} (DryRun={args.dry_run})")

    try:
        if args.rename_to_img:
            renamed = rename_to_img(raw_files_in(root), args.dry_run)
            logging.info(f"Renamed {len(renamed)} files.")
            return

        equipment = load_equipment(args.equipment)
        prompter = build_prompter(args, equipment)

        skip_dirs = load_skip_dirs(args.skip_dirs_file, root) if args.skip_dirs_file else set()
        app = AstroOrganizerApp(root, prompter, equipment, dry_run=args.dry_run, skip_dirs=skip_dirs)
        frame_types = [TYPE_CHOICES[t] for t in args.types] or list(ORGANIZE_ORDER)
        results = app.organize_all(frame_types)

        reporter = ReportGenerator()
        reporter.log_summary(results, app.parse_errors)
        if args.report_csv:
            reporter.write_csv(results, args.report_csv, app.parse_errors)

        if args.clean_thumbnails:
            remove_jpg_thumbnails(root, args.dry_run)
        if args.clean_empty_dirs:
            remove_empty_directories(root, args.dry_run)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)
    except AstroOrganizerError as e:
        logging.error(str(e))
        sys.exit(1)
    except Exception:
        logging.exception("Fatal error during organization.")
        sys.exit(1)


if __name__ == "__main__":
    main()
