"""
Reporter - Human- and machine-readable output for derivgen commands.
"""

import csv
import json
import logging
import sys
from typing import List, Optional, Sequence, TextIO

import yaml

from .generation_stats import GenerationStats
from .usage import UsageRow

USAGE_FIELDS = [
    ('entity_type', 'Entity Type'),
    ('bundle', 'Bundle'),
    ('view_mode', 'View Mode'),
    ('field_name', 'Field'),
    ('image_count', 'Images'),
]

FORMATS = ('table', 'json', 'csv', 'yaml')


class Reporter:
    """
    Writes command output.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reporter.

        Args:
            output: Output stream (default: stdout)
            logger: Optional logger instance
        """
        self.output = output or sys.stdout
        self.logger = logger or logging.getLogger(__name__)

    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)

    def _format_duration(self, seconds: float) -> str:
        """Format duration as human-readable string."""
        if seconds < 60:
            return f"{seconds:.1f} seconds"
        elif seconds < 3600:
            return f"{seconds / 60:.1f} minutes"
        else:
            return f"{seconds / 3600:.1f} hours"

    def report_usage(self, rows: Sequence[UsageRow], fmt: str = 'table') -> None:
        """
        Print show-usage rows.

        Args:
            rows: Usage rows
            fmt: One of table, json, csv, yaml
        """
        if fmt not in FORMATS:
            raise ValueError(f"Unknown format: {fmt}")

        records = [row.to_dict() for row in rows]
        if fmt == 'json':
            self._print(json.dumps(records, indent=2))
        elif fmt == 'yaml':
            self.output.write(yaml.safe_dump(records, sort_keys=False, default_flow_style=False))
        elif fmt == 'csv':
            writer = csv.writer(self.output, lineterminator='\n')
            writer.writerow([label for _, label in USAGE_FIELDS])
            for record in records:
                writer.writerow(['' if record[key] is None else record[key] for key, _ in USAGE_FIELDS])
        else:
            self._print_table(records)

    def _print_table(self, records: List[dict]) -> None:
        cells = [
            ['-' if record[key] is None else str(record[key]) for key, _ in USAGE_FIELDS]
            for record in records
        ]
        headers = [label for _, label in USAGE_FIELDS]
        widths = [
            max([len(headers[i])] + [len(row[i]) for row in cells])
            for i in range(len(headers))
        ]
        rule = '-' * (sum(widths) + 2 * (len(widths) - 1))

        def line(values):
            padded = [
                value.rjust(widths[i]) if i == len(values) - 1 else value.ljust(widths[i])
                for i, value in enumerate(values)
            ]
            return '  '.join(padded)

        self._print(rule)
        self._print(line(headers))
        self._print(rule)
        for row in cells:
            self._print(line(row))
        self._print(rule)

    def report_generation(self, stats: GenerationStats) -> None:
        """Print the final tally of a generate run."""
        self._print()
        self._print("=" * 50)
        self._print("DERIVATIVE GENERATION SUMMARY")
        self._print("=" * 50)
        self._print(f"  Processed:   {stats.processed:,}")
        self._print(f"  Success:     {stats.success:,}")
        self._print(f"  Failed:      {stats.failed:,}")
        self._print(f"  Skipped:     {stats.skipped:,}")
        if stats.skipped_sources:
            self._print(f"  Bindings skipped due to errors: {stats.skipped_sources:,}")
        self._print(f"  Time:        {self._format_duration(stats.elapsed_seconds)}")
        self._print(f"  Rate:        {stats.rate_per_minute:.1f}/min")
        self._print("=" * 50)
