"""
Report Formatter
================

Turns the outcomes of a run into a sorted, human-readable summary table.
"""

import os
import sys
from dataclasses import dataclass
from typing import Iterable, List, Optional, TextIO

from base_classes import CompressionOutcome

HEADERS = ('File', 'Codec', 'Size', 'Time')


def format_size(num_bytes: float) -> str:
    if num_bytes < 1024:
        return f"{int(num_bytes)} B"
    size = num_bytes / 1024.0
    for unit in ('KB', 'MB', 'GB'):
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} TB"


def format_duration(elapsed_ms: float) -> str:
    if elapsed_ms < 1000:
        return f"{elapsed_ms:.0f}ms"
    return f"{elapsed_ms / 1000:.2f}s"


def outcome_sort_key(outcome: CompressionOutcome):
    """Total order used for reports: source path, then codec name"""
    return (outcome.source_path, outcome.codec.value)


@dataclass(frozen=True)
class ReportRow:
    """Display-only projection of a kept outcome"""
    file: str
    codec: str
    size: str
    time: str

    def cells(self) -> tuple:
        return (self.file, self.codec, self.size, self.time)


class ReportFormatter:
    """Format compression outcomes as a table"""

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = base_dir

    def sort_outcomes(self, outcomes: Iterable[CompressionOutcome]) -> List[CompressionOutcome]:
        return sorted(outcomes, key=outcome_sort_key)

    def _display_path(self, path: str) -> str:
        if not self.base_dir:
            return path
        try:
            return os.path.relpath(path, self.base_dir)
        except ValueError:
            # different drive on Windows
            return path

    def to_row(self, outcome: CompressionOutcome) -> ReportRow:
        return ReportRow(
            file=self._display_path(outcome.source_path),
            codec=outcome.codec.value,
            size=format_size(outcome.compressed_size),
            time=format_duration(outcome.elapsed_ms),
        )

    def to_rows(self, outcomes: Iterable[CompressionOutcome]) -> List[ReportRow]:
        return [self.to_row(o) for o in self.sort_outcomes(outcomes)]

    def render_table(self, rows: List[ReportRow]) -> str:
        if not rows:
            return "No files were compressed."

        widths = [len(h) for h in HEADERS]
        for row in rows:
            for i, cell in enumerate(row.cells()):
                widths[i] = max(widths[i], len(cell))

        # size and time columns are right-aligned
        def render(cells) -> str:
            parts = []
            for i, cell in enumerate(cells):
                parts.append(cell.rjust(widths[i]) if i >= 2 else cell.ljust(widths[i]))
            return "  ".join(parts).rstrip()

        lines = [render(HEADERS), "  ".join("-" * w for w in widths)]
        lines.extend(render(row.cells()) for row in rows)
        return "\n".join(lines)

    def render_summary(self, elapsed_seconds: float) -> str:
        return f"✨  Compressed in {elapsed_seconds:.2f}s."

    def print_report(self,
                     outcomes: Iterable[CompressionOutcome],
                     elapsed_seconds: float,
                     stream: Optional[TextIO] = None) -> str:
        """Write the summary line and table to ``stream`` and return the text"""
        stream = stream or sys.stdout
        text = (f"\n{self.render_summary(elapsed_seconds)}\n\n"
                f"{self.render_table(self.to_rows(outcomes))}\n")
        stream.write(text)
        stream.flush()
        return text
