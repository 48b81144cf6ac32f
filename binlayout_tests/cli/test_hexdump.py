import os
from contextlib import redirect_stdout
from io import StringIO

from structlog.testing import capture_logs

from binlayout.cli.hexdump import create_parser, execute, hexdump_lines
from binlayout_tests import unittest


class HexdumpTest(unittest.TestCase):
    def test_lines(self):
        data = bytes(range(0x41, 0x41 + 20))
        lines = list(hexdump_lines(data))

        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].startswith('00000000  41 42 43'))
        self.assertTrue(lines[0].endswith('ABCDEFGHIJKLMNOP'))
        self.assertTrue(lines[1].startswith('00000010  51 52 53 54 '))
        self.assertTrue(lines[1].endswith('QRST'))
        # the text column is aligned
        self.assertEqual(lines[0].index('ABCD'), lines[1].index('QRST'))

    def test_empty(self):
        self.assertEqual(list(hexdump_lines(b'')), [])

    def test_execute(self):
        path = os.path.join(self.mkdtemp(), 'data.bin')
        with open(path, 'wb') as fp:
            fp.write(self.random_bytes(40))

        parser = create_parser()
        args = parser.parse_args(['--input', path, '--width', '8'])
        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                result = execute(args)

        self.assertEqual(result, 0)
        # Transforming prints str in array
        output = f.getvalue().strip().splitlines()
        self.assertEqual(len(output), 5)
        self.assertTrue(output[4].startswith('00000020'))

    def test_invalid_width(self):
        path = os.path.join(self.mkdtemp(), 'data.bin')
        with open(path, 'wb'):
            pass

        args = create_parser().parse_args(['--input', path, '--width', '0'])
        f = StringIO()
        with self.assertRaises(SystemExit) as cm:
            with redirect_stdout(f):
                execute(args)

        self.assertEqual(cm.exception.args[0], 2)
        self.assertIn('--width must be positive', f.getvalue())
