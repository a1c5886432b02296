# tests/test_log.py
"""
Tests for ExpenseFeed.log.log
(covers TankHandler, the Qt bridge and the setup helpers).

Run:
    python -m unittest tests.test_log
"""
import logging
from typing import List

from PySide6.QtCore import QtMsgType

from ExpenseFeed.log.log import (
    TankHandler,
    get_tank_handler,
    qt_message_handler,
    set_logging_level,
    setup_logging,
)
from ExpenseFeed.signals import signals
from tests.base import BaseTestCase, SignalRecorder


class LogModuleTests(BaseTestCase):
    """
    Each test starts with a fresh root logger configured by
    setup_logging(enable_stream_handler=False).
    """

    def setUp(self) -> None:
        super().setUp()

        # enable logging
        logging.disable(logging.NOTSET)

        setup_logging(enable_stream_handler=False,
                      enable_qt_handler=False,
                      log_level=logging.DEBUG)

        self.root_logger = logging.getLogger()
        self.tank: TankHandler = get_tank_handler()

    def tearDown(self) -> None:
        setup_logging(enable_stream_handler=False, enable_qt_handler=False)
        super().tearDown()

    def test_setup_logging_installs_tank_handler_only(self):
        self.assertEqual(
            [type(h) for h in self.root_logger.handlers],
            [TankHandler],
        )
        self.assertIs(self.tank, self.root_logger.handlers[0])

    def test_setup_logging_with_stream_handler(self):
        setup_logging(enable_stream_handler=True, enable_qt_handler=False)
        self.assertEqual(len(self.root_logger.handlers), 2)
        self.assertIsInstance(self.root_logger.handlers[0], logging.StreamHandler)

    def test_tank_handler_stores_and_filters(self):
        self.tank.clear_logs()
        logging.debug('dbg message')
        logging.error('err message')
        self.assertEqual(len(self.tank.tank), 2)
        errs: List[str] = self.tank.get_logs(logging.ERROR)
        self.assertEqual(len(errs), 1)
        self.assertIn('err message', errs[0])
        self.tank.clear_logs()
        self.assertEqual(len(self.tank.tank), 0)

    def test_tank_keeps_most_recent_records(self):
        tank = TankHandler(capacity=3)
        self.root_logger.addHandler(tank)
        try:
            for i in range(5):
                logging.info(f'record {i}')
        finally:
            self.root_logger.removeHandler(tank)
        self.assertEqual([m for _, m in tank.tank], ['record 2', 'record 3', 'record 4'])

    def test_handler_level_drops_lower_records(self):
        set_logging_level(logging.WARNING)
        self.tank.clear_logs()
        logging.info('dropped')
        logging.warning('kept')
        msgs = self.tank.get_logs()
        self.assertEqual(len(msgs), 1)
        self.assertIn('kept', msgs[0])

    def test_logging_an_error_does_not_broadcast(self):
        errors = SignalRecorder(signals.error)
        logging.error('only logged')
        self.assertEqual(errors.count, 0)
        self.assertTrue(any('only logged' in m for m in self.tank.get_logs(logging.ERROR)))

    def test_set_logging_level_accepts_valid_levels(self):
        set_logging_level(logging.ERROR)
        self.assertEqual(self.root_logger.level, logging.ERROR)
        for h in self.root_logger.handlers:
            self.assertEqual(h.level, logging.ERROR)

    def test_set_logging_level_rejects_non_int(self):
        with self.assertRaises(ValueError):
            set_logging_level('INFO')  # type: ignore[arg-type]

    def test_set_logging_level_rejects_unknown(self):
        with self.assertRaises(ValueError):
            set_logging_level(1234)

    def test_qt_message_handler_maps_to_logging(self):
        qt_message_handler(QtMsgType.QtInfoMsg, None, 'Qt info')
        qt_message_handler(QtMsgType.QtWarningMsg, None, 'Qt warn ')
        msgs = self.tank.get_logs()
        self.assertTrue(any('Qt info' in m for m in msgs))
        self.assertTrue(any(m.endswith('Qt warn') for m in msgs))

    def test_qt_message_handler_fatal_exits(self):
        with self.assertRaises(SystemExit):
            qt_message_handler(QtMsgType.QtFatalMsg, None, 'fatal')
