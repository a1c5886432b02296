"""Test package.

Settings are redirected to a throwaway directory before :mod:`ExpenseFeed`
is imported, so the test run never touches the real AppData config.
"""
import os
import tempfile

os.environ.setdefault('EXPENSEFEED_CONFIG_DIR', tempfile.mkdtemp(prefix='expensefeed_test_'))
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')
