"""CSV helpers for storing and re-reading direct rate configurations."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Sequence

from fx_crossrate.core.models import DirectRate, RateTuple
from fx_crossrate.exceptions import CurrencyValidationError

CSV_HEADER = ("From", "To", "Rate")


class DirectRateCSVExporter:
    """Write direct rates as ``From,To,Rate`` rows."""

    def write(self, rates: Sequence[DirectRate | RateTuple], csv_path: str | Path) -> Path:
        if not rates:
            raise ValueError("rates collection is empty")

        path = Path(csv_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        records = [DirectRate.coerce(item) for item in rates]
        with path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle)
            writer.writerow(CSV_HEADER)
            for record in records:
                writer.writerow([record.pair.base, record.pair.quote, str(record.rate)])
        return path


class DirectRateCSVParser:
    """Parse CSV files produced by :class:`DirectRateCSVExporter`.

    Header names are matched case-insensitively; blank lines are skipped.
    Rows are returned in file order so duplicate pairs keep first-seen
    precedence once loaded into a converter.
    """

    def parse(self, csv_path: str | Path) -> list[DirectRate]:
        path = Path(csv_path)
        if not path.exists():
            raise FileNotFoundError(path)

        with path.open("r", newline="", encoding="utf-8") as handle:
            reader = csv.reader(handle)
            header = next(reader, None)
            self._validate_header(header)
            rows: list[DirectRate] = []
            for row in reader:
                if not any(cell.strip() for cell in row):
                    continue
                if len(row) < len(CSV_HEADER):
                    raise CurrencyValidationError(
                        f"{path.name}:{reader.line_num}: expected From,To,Rate columns"
                    )
                base, quote, rate = (cell.strip() for cell in row[: len(CSV_HEADER)])
                try:
                    rows.append(DirectRate.of(base, quote, rate))
                except CurrencyValidationError as exc:
                    raise CurrencyValidationError(f"{path.name}:{reader.line_num}: {exc}") from exc
        return rows

    @staticmethod
    def _validate_header(fieldnames: Iterable[str] | None) -> None:
        if not fieldnames:
            raise ValueError("CSV file does not contain a header row")
        normalized = [field.strip().lower() for field in fieldnames]
        if normalized[: len(CSV_HEADER)] != [field.lower() for field in CSV_HEADER]:
            raise ValueError("Unexpected CSV header format")


__all__ = ["CSV_HEADER", "DirectRateCSVExporter", "DirectRateCSVParser"]
