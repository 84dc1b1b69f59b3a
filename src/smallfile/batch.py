"""
Batch conversion of legacy rows.

Rows are numbered before dispatch so that results can be reported per line and
returned in input order, whether they were converted serially or on a thread pool.
Failures are written to a `stairval` notepad: fatal rows as errors, rows with a
recoverable validation problem as warnings.
"""

import logging
import typing
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import pandas as pd
from stairval.notepad import Notepad

from .assembler import ConversionContext, ConversionResult, RecordAssembler
from .config import ConversionSettings
from .loader import iter_legacy_rows
from .model import CanonicalRecord, LegacyRow
from .qc import QcCode

LOGGER = logging.getLogger(__name__)


@dataclass
class BatchReport:
    """
    Per-line outcomes of a batch, in input order.

    Attributes:
        results: one `ConversionResult` per processed line.
        halted: True if processing stopped early at a fatal row.
    """

    results: list[ConversionResult] = field(default_factory=list)
    halted: bool = False

    @property
    def records(self) -> list[CanonicalRecord]:
        return [result.record for result in self.results if result.ok]

    @property
    def failures(self) -> list[ConversionResult]:
        return [result for result in self.results if not result.ok]

    def qc_counts(self) -> Counter:
        counts: Counter = Counter()
        for result in self.results:
            counts.update(result.qc_codes)
        return counts

    def count_records_with_issues(self) -> int:
        return sum(1 for result in self.results if result.has_qc_issues())

    def summary(self) -> str:
        lines = [f"Converted {len(self.records)} of {len(self.results)} rows"]
        if self.failures:
            lines.append(f"Failed rows: {len(self.failures)}")
        if self.halted:
            lines.append("Stopped at the first fatal row")
        counts = self.qc_counts()
        for code in QcCode:
            count = counts[code]
            if count:
                lines.append(f"{code.name}: {count}")
        return "\n".join(lines)


def _collect(report: BatchReport, result: ConversionResult, notepad: Notepad, halt_on_error: bool) -> bool:
    """Record one outcome; returns False when the batch must stop."""
    report.results.append(result)
    if result.error is None:
        return True
    message = f"Line {result.line_number}: {result.error}"
    if not result.fatal:
        notepad.add_warning(message)
        return True
    notepad.add_error(message)
    if halt_on_error:
        report.halted = True
        return False
    return True


def convert_rows(
    rows: typing.Iterable[LegacyRow],
    context: ConversionContext,
    notepad: Notepad,
    settings: typing.Optional[ConversionSettings] = None,
    first_line: int = 1,
) -> BatchReport:
    """
    Convert `rows`, numbering them from `first_line`.

    With `settings.halt_on_error`, the batch stops after the first fatal row; the
    rows before it are kept in the report. On a thread pool, rows that were not
    started yet are cancelled. Rows already running finish but are left out of the report.
    """
    settings = settings or ConversionSettings()
    assembler = RecordAssembler(context)
    numbered = list(enumerate(rows, start=first_line))
    report = BatchReport()

    if settings.max_workers > 1:
        with ThreadPoolExecutor(max_workers=settings.max_workers) as executor:
            futures = [executor.submit(assembler.convert_row, row, line_number) for line_number, row in numbered]
            for position, future in enumerate(futures):
                if not _collect(report, future.result(), notepad, settings.halt_on_error):
                    for pending in futures[position + 1:]:
                        pending.cancel()
                    break
    else:
        for line_number, row in numbered:
            if not _collect(report, assembler.convert_row(row, line_number), notepad, settings.halt_on_error):
                break

    LOGGER.info(report.summary())
    return report


def convert_table(
    df: pd.DataFrame,
    context: ConversionContext,
    notepad: Notepad,
    settings: typing.Optional[ConversionSettings] = None,
) -> BatchReport:
    """
    Convert a table of legacy rows whose columns carry the legacy headers.
    Line numbers count the header as line 1, as in the source file.
    """
    return convert_rows(iter_legacy_rows(df), context, notepad, settings=settings, first_line=2)
