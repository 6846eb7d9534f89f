# ========================
# tests/test_ingestion.py
# ========================

import unittest
import os
import sys

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from crash_dashboard.pipeline.exceptions import ParseError
from crash_dashboard.pipeline.ingestion import CSVParser, parse_csv_text

class TestCSVParser(unittest.TestCase):
    """Test the CSV ingestion module."""

    def test_header_keys_every_record(self):
        """Test that each data row becomes a record keyed by the header."""
        text = (
            "Report ID,Incident Date,Highest Injury Severity Alleged\n"
            "R-1,2023-01-15,Minor\n"
            "R-2,2023-01-20,Unknown\n"
        )
        parser = CSVParser()
        records = parser.parse(text)

        self.assertEqual(parser.header, ['Report ID', 'Incident Date', 'Highest Injury Severity Alleged'])
        self.assertEqual(len(records), 2)
        self.assertEqual(records[0], {
            'Report ID': 'R-1',
            'Incident Date': '2023-01-15',
            'Highest Injury Severity Alleged': 'Minor',
        })
        self.assertEqual(records[1]['Highest Injury Severity Alleged'], 'Unknown')

    def test_quoted_fields_with_delimiters(self):
        """Test that quoted fields may contain commas, quotes and newlines."""
        text = (
            'City,Incident Date,Narrative\n'
            '"Austin, TX",JUL-2021,"Vehicle was struck ""from behind""\nat low speed"\n'
        )
        records = parse_csv_text(text)

        self.assertEqual(len(records), 1)
        self.assertEqual(records[0]['City'], 'Austin, TX')
        self.assertEqual(records[0]['Narrative'], 'Vehicle was struck "from behind"\nat low speed')

    def test_empty_lines_are_skipped(self):
        """Test that blank lines anywhere in the feed produce no records."""
        text = "\n\nA,B\n\n1,2\n\r\n3,4\n\n"
        parser = CSVParser()
        records = parser.parse(text)

        self.assertEqual(parser.header, ['A', 'B'])
        self.assertEqual(records, [{'A': '1', 'B': '2'}, {'A': '3', 'B': '4'}])

    def test_whitespace_and_delimiter_only_lines_are_records(self):
        """Test that only truly empty lines are skipped."""
        parser = CSVParser()
        records = parser.parse("A,B\n   \n,\n1,2\n")

        self.assertEqual(records, [
            {'A': '   ', 'B': ''},
            {'A': '', 'B': ''},
            {'A': '1', 'B': '2'},
        ])
        self.assertEqual(parser.rows_parsed, 3)

    def test_short_row_gets_empty_values(self):
        """Test that a row with fewer fields than the header is kept."""
        records = parse_csv_text("A,B,C\n1,2\n")

        self.assertEqual(records, [{'A': '1', 'B': '2', 'C': ''}])

    def test_long_row_keeps_header_fields_only(self):
        """Test that values beyond the header width are dropped."""
        records = parse_csv_text("A,B\n1,2,3,4\n")

        self.assertEqual(records, [{'A': '1', 'B': '2'}])

    def test_crlf_line_endings_and_bom(self):
        """Test Windows line endings and a leading byte-order mark."""
        records = parse_csv_text("\ufeffIncident Date,Severity\r\n2021-05-01,Minor\r\n")

        self.assertEqual(records, [{'Incident Date': '2021-05-01', 'Severity': 'Minor'}])

    def test_bytes_input_is_decoded(self):
        """Test that bytes are decoded with the configured encoding."""
        records = CSVParser(encoding='utf-8').parse("Make,Model\nCitroën,C4\n".encode('utf-8'))

        self.assertEqual(records[0]['Make'], 'Citroën')

    def test_undecodable_bytes_raise_parse_error(self):
        """Test that input which is not valid text is rejected."""
        with self.assertRaises(ParseError):
            CSVParser(encoding='utf-8').parse(b"A,B\n\xff\xfe\xfa,1\n")

    def test_non_text_input_raises_parse_error(self):
        """Test that non-string input is rejected."""
        with self.assertRaises(ParseError):
            CSVParser().parse(12345)

    def test_empty_input(self):
        """Test that an empty feed parses to no records."""
        parser = CSVParser()

        self.assertEqual(parser.parse(""), [])
        self.assertEqual(parser.header, [])

    def test_header_only(self):
        """Test a feed with a header row and no data rows."""
        parser = CSVParser()

        self.assertEqual(parser.parse("Incident Date,Severity\n"), [])
        self.assertEqual(parser.header, ['Incident Date', 'Severity'])

    def test_unsplittable_row_is_skipped(self):
        """Test that a row the csv module rejects does not abort the parse."""
        text = "A,B\n1,2\nbad\x00row,3\n4,5\n"
        parser = CSVParser()
        records = parser.parse(text)

        self.assertIn({'A': '1', 'B': '2'}, records)
        self.assertIn({'A': '4', 'B': '5'}, records)
        self.assertLessEqual(len(records), 3)

    def test_parse_is_repeatable(self):
        """Test that the same parser instance can parse several feeds."""
        parser = CSVParser()
        first = parser.parse("A\n1\n2\n")
        second = parser.parse("B\n3\n")

        self.assertEqual(len(first), 2)
        self.assertEqual(second, [{'B': '3'}])
        self.assertEqual(parser.header, ['B'])
        self.assertEqual(parser.rows_parsed, 1)

if __name__ == '__main__':
    unittest.main()
