import sys
import unittest
from contextlib import redirect_stdout
from io import StringIO
from unittest.mock import patch

from structlog.testing import capture_logs

from binlayout.cli import main


class CliMainTest(unittest.TestCase):
    def test_init(self):
        # basically making sure importing works
        cli = main.CliManager()

        # Help method only prints on the screen
        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                cli.help()
        # Transforming prints str in array
        output = f.getvalue().strip().splitlines()

        self.assertTrue(any('demo' in line for line in output))
        self.assertTrue(any('hexdump' in line for line in output))

    def test_help(self):
        cli = main.CliManager()

        f = StringIO()
        with self.assertRaises(SystemExit) as cm:
            with capture_logs():
                with redirect_stdout(f):
                    with patch.object(sys, 'argv', ['binlayout-cli', 'demo', '--help']):
                        cli.execute_from_command_line()

        # Must exit with code 0
        self.assertEqual(cm.exception.args[0], 0)
        self.assertIn('--output', f.getvalue())

    def test_unknown_command(self):
        cli = main.CliManager()

        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                with patch.object(sys, 'argv', ['binlayout-cli', 'no_such_command']):
                    result = cli.execute_from_command_line()

        self.assertEqual(result, -1)
        self.assertIn('Unknown command: "no_such_command"', f.getvalue())

    def test_no_command_prints_help(self):
        cli = main.CliManager()

        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                with patch.object(sys, 'argv', ['binlayout-cli']):
                    result = cli.execute_from_command_line()

        self.assertEqual(result, 0)
        self.assertIn('[examples]', f.getvalue())

    def test_duplicated_command(self):
        cli = main.CliManager()

        with self.assertRaises(ValueError):
            cli.add_cmd('dev', 'demo', main, 'clashes with the existing demo command')
