"""Tests for ExpenseFeed.data.export."""
import datetime
import os
import unittest
from pathlib import Path
from unittest.mock import patch

from ExpenseFeed.core.store import Record
from ExpenseFeed.data import export
from ExpenseFeed.data.export import Exporter
from ExpenseFeed.status import status
from tests.base import BaseTestCase, SignalRecorder

FOOD = Record(id='a', amount=12.5, description='Lunch', category='food', date=datetime.date(2024, 1, 5))
TRANSPORT = Record(id='b', amount=7.0, description='Bus ticket', category='transport',
                   date=datetime.date(2024, 1, 10))


class ToCsvTests(unittest.TestCase):
    def test_two_records(self):
        text = export.to_csv([FOOD, TRANSPORT], locale='nl_NL', date_format='dd-MM-yyyy')
        lines = text.split('\n')
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[0], 'Date,Amount,Description,Category')
        self.assertEqual(lines[1], '05-01-2024,12.50,Lunch,food')
        self.assertEqual(lines[2], '10-01-2024,7.00,Bus ticket,transport')

    def test_no_trailing_newline(self):
        text = export.to_csv([FOOD])
        self.assertFalse(text.endswith('\n'))

    def test_empty(self):
        self.assertEqual(export.to_csv([]), '')

    def test_keeps_input_order(self):
        text = export.to_csv([TRANSPORT, FOOD])
        self.assertIn('Bus ticket', text.split('\n')[1])

    def test_default_date_pattern(self):
        text = export.to_csv([FOOD])
        self.assertTrue(text.split('\n')[1].startswith('5-1-2024,'))

    def test_quotes_fields_with_delimiters(self):
        record = Record(id='c', amount=1.0, description='Coffee, large', category='say "hi"',
                        date=datetime.date(2024, 1, 1))
        line = export.to_csv([record]).split('\n')[1]
        self.assertEqual(line, '1-1-2024,1.00,"Coffee, large","say ""hi"""')

    def test_frame_is_text(self):
        df = export.to_frame([FOOD])
        self.assertEqual(list(df.columns), ['Date', 'Amount', 'Description', 'Category'])
        self.assertEqual(df.iloc[0]['Amount'], '12.50')


class ExportFilenameTests(unittest.TestCase):
    def test_filename(self):
        self.assertEqual(export.export_filename('expenses', datetime.date(2024, 1, 31)), 'expenses_2024-01-31.csv')

    def test_defaults_to_today(self):
        today = datetime.date.today().isoformat()
        self.assertEqual(export.export_filename(), f'expenses_{today}.csv')


class ExporterTests(BaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.exporter = Exporter(locale='nl_NL', date_format='dd-MM-yyyy')

    def test_can_export(self):
        self.assertFalse(self.exporter.can_export([]))
        self.assertTrue(self.exporter.can_export([FOOD]))

    def test_export_writes_file(self):
        exported = SignalRecorder(self.exporter.exported)
        path = self.exporter.export([FOOD, TRANSPORT], self.temp_dir, today=datetime.date(2024, 2, 1))

        self.assertEqual(path, Path(self.temp_dir) / 'expenses_2024-02-01.csv')
        self.assertEqual(path.read_text(encoding='utf-8'), self.exporter.to_csv([FOOD, TRANSPORT]))
        self.assertEqual(exported.calls, [(str(path),)])

    def test_export_creates_directory(self):
        directory = os.path.join(self.temp_dir, 'nested', 'dir')
        path = self.exporter.export([FOOD], directory)
        self.assertTrue(path.exists())

    def test_export_empty_writes_nothing(self):
        self.assertIsNone(self.exporter.export([], self.temp_dir))
        self.assertEqual(os.listdir(self.temp_dir), [])

    def test_export_failure_raises_status_exception(self):
        with patch.object(Path, 'write_text', side_effect=PermissionError('denied')):
            with self.assertRaises(status.ExportFailedException):
                self.exporter.export([FOOD], self.temp_dir)


if __name__ == '__main__':
    unittest.main()
