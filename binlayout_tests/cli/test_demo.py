import os
from contextlib import redirect_stdout
from io import StringIO

from structlog.testing import capture_logs

from binlayout.cli.demo import SAMPLE_LAYOUT, Record, create_parser, execute, read_files, write_files
from binlayout.serialization import Deserializer
from binlayout_tests import unittest


class DemoTest(unittest.TestCase):
    def test_write_and_read_files(self):
        output_dir = self.mkdtemp()
        with capture_logs():
            write_files(output_dir)
            result = read_files(output_dir)

        self.assertEqual(result['names'], ['ann', 'joseph', 'catherine'])
        self.assertEqual(result['heights'], [2, 3, 5, 7, 11, 13, 17, 23, 29, 31, 37, 43])
        self.assertEqual(result['measurements'], 1234)
        self.assertEqual(result['records'], [
            Record(),
            Record(['bob'], (1.5,) * 12, 7),
            Record(['ann', 'joseph', 'catherine'], (2, 3, 5, 7, 11, 13, 17, 23, 29, 31, 37, 43), 1234),
        ])
        self.assertEqual(result['text'], 'Some string, idk')
        self.assertEqual(result['number'], 1009)
        self.assertEqual(result['tag'], 0xDEADFACE)
        self.assertEqual(result['name_set'], {'Ann', 'Joseph', 'Catherine'})

    def test_file_starts_with_sample_layout(self):
        output_dir = self.mkdtemp()
        with capture_logs():
            write_files(output_dir)

        with open(os.path.join(output_dir, 'file.bin'), 'rb') as fp:
            data = fp.read()
        names, heights, measurements = SAMPLE_LAYOUT.read(Deserializer.build_bytes_deserializer(data))
        self.assertEqual(names, ['ann', 'joseph', 'catherine'])
        self.assertEqual(measurements, 1234)

    def test_execute(self):
        output_dir = os.path.join(self.mkdtemp(), 'new_dir')
        parser = create_parser()
        args = parser.parse_args(['--output', output_dir])

        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                result = execute(args)

        self.assertEqual(result, 0)
        self.assertTrue(os.path.isfile(os.path.join(output_dir, 'set.bin')))
        # Transforming prints str in array
        output = f.getvalue().strip().splitlines()
        self.assertIn("text: 'Some string, idk'", output)
        self.assertIn('number: 1009', output)
