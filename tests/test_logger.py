#!/usr/bin/env python3
"""Tests for logging configuration"""

import logging
import os
import tempfile
import unittest

from pyb2b.logger import (ROOT_LOGGER, LogContext, LogLevel, LoggerConfig,
                          get_logger, setup_logger, setup_logger_from_config)


class TestLogger(unittest.TestCase):

    def tearDown(self):
        for name in (ROOT_LOGGER, 'pyb2b.ssr.b2b_reader'):
            logger = logging.getLogger(name)
            logger.handlers = []
            logger.setLevel(logging.NOTSET)
            logger.propagate = True

    def test_trace_level(self):
        self.assertEqual(logging.getLevelName(LogLevel.TRACE.value), 'TRACE')
        logger = setup_logger(level='TRACE', console=False)
        with self.assertLogs(ROOT_LOGGER, level=LogLevel.TRACE.value) as cm:
            logger.trace("mask IODP=%d", 3)
        self.assertEqual(cm.records[0].levelname, 'TRACE')
        self.assertEqual(cm.records[0].getMessage(), 'mask IODP=3')

    def test_trace_disabled(self):
        logger = setup_logger(level='INFO', console=False)
        with self.assertLogs(ROOT_LOGGER, level='INFO') as cm:
            logger.trace("hidden")
            logger.info("shown")
        self.assertEqual([r.getMessage() for r in cm.records], ['shown'])

    def test_unknown_level(self):
        with self.assertRaises(ValueError):
            setup_logger(level='VERBOSE')

    def test_log_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'b2b.log')
            logger = setup_logger(level='DEBUG', log_file=path, console=False)
            logger.debug("written")
            for handler in logger.handlers:
                handler.close()
            with open(path) as fp:
                self.assertIn('written', fp.read())

    def test_module_logger_does_not_propagate(self):
        logger = setup_logger('pyb2b.ssr.b2b_reader', level='DEBUG')
        self.assertFalse(logger.propagate)
        self.assertEqual(len(logger.handlers), 1)

    def test_log_context(self):
        logger = get_logger('pyb2b.gnss.b2b_satpos')
        logger.setLevel(logging.WARNING)
        with LogContext(logger, 'DEBUG'):
            self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(logger.level, logging.WARNING)
        logger.setLevel(logging.NOTSET)

    def test_config(self):
        config = LoggerConfig.from_dict({'default_level': 'WARNING',
                                         'module_levels': {'pyb2b.ssr.b2b_reader': 'DEBUG'}})
        self.assertEqual(config.level_for('pyb2b.ssr.b2b_reader'), 'DEBUG')
        self.assertEqual(config.level_for('pyb2b.io.rinex'), 'WARNING')

    def test_config_rejects_unknown(self):
        with self.assertRaises(ValueError):
            LoggerConfig.from_dict({'level': 'DEBUG'})
        with self.assertRaises(ValueError):
            LoggerConfig(module_levels={'pyb2b.io.rinex': 'VERBOSE'})

    def test_setup_from_config(self):
        config = setup_logger_from_config({'default_level': 'ERROR', 'console': False,
                                           'module_levels': {'pyb2b.ssr.b2b_reader': 'DEBUG'}})
        self.assertIsInstance(config, LoggerConfig)
        self.assertEqual(logging.getLogger(ROOT_LOGGER).level, logging.ERROR)
        self.assertEqual(logging.getLogger('pyb2b.ssr.b2b_reader').level, logging.DEBUG)


if __name__ == '__main__':
    unittest.main()
