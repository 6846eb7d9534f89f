# ========================
# crash_dashboard/pipeline/ingestion.py
# ========================

"""
Data Ingestion Module

Turns the raw text of an incident report feed into field-keyed records.
"""

import csv
import io
import logging
from typing import Dict, Iterator, List, Union

from .exceptions import ParseError
from .models import IncidentRecord

logger = logging.getLogger(__name__)

class CSVParser:
    """
    Parses comma-delimited, quote-aware CSV text whose first line is the header.
    Each subsequent non-empty row becomes one record keyed by the header fields.
    """

    def __init__(self, encoding: str = 'utf-8', delimiter: str = ','):
        """
        Initialize the CSV parser.

        Args:
            encoding (str): Encoding used when the input is given as bytes
            delimiter (str): Field delimiter
        """
        self.encoding = encoding
        self.delimiter = delimiter
        self.header: List[str] = []
        self.rows_parsed = 0
        self.rows_skipped = 0

    def parse(self, data: Union[str, bytes]) -> List[IncidentRecord]:
        """
        Parse a whole feed into a list of records.

        Args:
            data (str | bytes): Raw feed contents

        Returns:
            list[dict]: One record per data row, in file order

        Raises:
            ParseError: If ``data`` is not decodable text
        """
        records = list(self.iter_records(data))
        logger.info(
            f"Parsed {len(records)} records ({self.rows_skipped} rows skipped), "
            f"{len(self.header)} columns"
        )
        return records

    def iter_records(self, data: Union[str, bytes]) -> Iterator[IncidentRecord]:
        """
        A generator that yields one record per data row.

        Rows with fewer fields than the header get empty strings for the
        missing fields; values beyond the header width are dropped. Rows the
        csv module cannot split are skipped.
        """
        text = self._to_text(data)
        self.header = []
        self.rows_parsed = 0
        self.rows_skipped = 0

        reader = csv.reader(io.StringIO(text, newline=''), delimiter=self.delimiter)
        while True:
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as e:
                self.rows_skipped += 1
                logger.debug(f"Skipping unsplittable row near line {reader.line_num}: {e}")
                continue

            if self._is_empty(row):
                continue

            if not self.header:
                self.header = row
                logger.debug(f"CSV header: {self.header}")
                continue

            self.rows_parsed += 1
            yield self._to_record(row)

    def _to_text(self, data: Union[str, bytes]) -> str:
        """Decode bytes input and drop a leading byte-order mark."""
        if isinstance(data, (bytes, bytearray)):
            try:
                data = bytes(data).decode(self.encoding)
            except (UnicodeDecodeError, LookupError) as e:
                raise ParseError(f"Input is not valid {self.encoding} text: {e}") from e
        elif not isinstance(data, str):
            raise ParseError(f"Expected text input, got {type(data).__name__}")

        return data.lstrip('\ufeff')

    def _to_record(self, row: List[str]) -> IncidentRecord:
        if len(row) > len(self.header):
            logger.debug(f"Row {self.rows_parsed} has {len(row)} fields, header has {len(self.header)}")
        record: Dict[str, str] = {}
        for index, name in enumerate(self.header):
            record[name] = row[index] if index < len(row) else ''
        return record

    @staticmethod
    def _is_empty(row: List[str]) -> bool:
        return not row or row == ['']


def parse_csv_text(data: Union[str, bytes], encoding: str = 'utf-8') -> List[IncidentRecord]:
    """Parse one feed with a fresh CSVParser."""
    return CSVParser(encoding=encoding).parse(data)
