import csv
import logging
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List

from .exceptions import ParseError
from .models import RelocationResult

HEADERS = [
    "Source Path",
    "Status",
    "Destination Path",
    "Created Directory",
    "Notes",
]


class ReportGenerator:
    def write_csv(self,
                  results: Iterable[RelocationResult],
                  output_csv: Path,
                  parse_errors: Iterable[ParseError] = ()) -> int:
        """
        Writes one row per relocation (and per unparseable file) so a dry run
        can be reviewed before the real move. Returns the number of rows.
        """
        logging.info(f"Writing report to {output_csv}")
        rows = 0
        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(HEADERS)

            for res in results:
                writer.writerow([
                    str(res.source),
                    res.status.value,
                    str(res.destination),
                    str(res.created_dir) if res.created_dir else "",
                    res.note,
                ])
                rows += 1

            for err in parse_errors:
                writer.writerow([str(err.path), "Parse Error", "", "", err.reason])
                rows += 1

        return rows

    def summarize(self, results: Iterable[RelocationResult]) -> Dict[str, int]:
        counts = Counter(res.status.value for res in results)
        return dict(counts)

    def log_summary(self, results: List[RelocationResult], parse_errors: List[ParseError]):
        summary = self.summarize(results)
        if not summary and not parse_errors:
            logging.info("No files need moving.")
            return
        for status, count in sorted(summary.items()):
            logging.info(f"{status}: {count}")
        if parse_errors:
            logging.warning(f"Unparseable filenames: {len(parse_errors)}")
