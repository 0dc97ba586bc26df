from __future__ import annotations

from typing import List, Sequence

from .models import FieldCompleteness, QualityReport, Record


class QualityReporter:
    """Completeness statistics over a final record set.

    The first record's keys are taken as the schema for per-field ratios;
    a record counts as incomplete if any of its own values is empty."""

    def report(self, records: Sequence[Record]) -> QualityReport:
        """Return per-field completeness and the incomplete-record count."""
        total = len(records)
        if total == 0:
            return QualityReport(total_records=0)

        fields: List[FieldCompleteness] = []
        for name in records[0]:
            present = sum(1 for r in records if r.get(name, ""))
            fields.append(FieldCompleteness(field=name, present=present, total=total))

        incomplete = sum(1 for r in records if any(v == "" for v in r.values()))
        return QualityReport(total_records=total, fields=fields, incomplete_records=incomplete)


def format_summary(report: QualityReport) -> str:
    lines = ["", "Scraping Summary:", f"Total records scraped: {report.total_records}"]

    if report.fields:
        lines.append("")
        lines.append("Field distribution:")
        for item in report.fields:
            lines.append(
                f"  {item.field}: {item.present}/{item.total} records have values ({item.percent:.1f}% complete)"
            )

    lines.append("")
    lines.append("Data quality issues:")
    if report.total_records == 0:
        lines.append("  No records found. Check your selectors and URL.")
    else:
        lines.append(
            f"  {report.incomplete_records}/{report.total_records} records have missing values "
            f"({report.incomplete_ratio * 100:.1f}%)"
        )
    return "\n".join(lines)
