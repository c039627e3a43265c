import io
import logging
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stderr

from payment_engine.cli import main

FIXTURES = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fixtures")


class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.log_file = os.path.join(self.tmpdir, "log.txt")

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def run_main(self, filename):
        stdout = io.StringIO()
        status = main([os.path.join(FIXTURES, filename), "--log-file", self.log_file], stdout=stdout)
        return status, stdout.getvalue()

    def test__sample1__output_matches_expected(self):
        status, csv_output = self.run_main("sample1.csv")
        self.assertEqual(0, status)
        self.assertEqual((
            "client,available,held,total,locked\n"
            "1,1.5000,0.0000,1.5000,false\n"
            "2,2.0000,0.0000,2.0000,false\n"
        ), csv_output)

    def test__sample1a_no_header_in_input__output_matches_expected(self):
        _, csv_output = self.run_main("sample1a.csv")
        self.assertEqual((
            "client,available,held,total,locked\n"
            "1,1.5000,0.0000,1.5000,false\n"
            "2,2.0000,0.0000,2.0000,false\n"
        ), csv_output)

    def test__sample2__output_matches_expected(self):
        # nonstandard field order with some junk columns to ignore
        _, csv_output = self.run_main("sample2.csv")
        self.assertEqual((
            "client,available,held,total,locked\n"
            "1,1.5000,0.0000,1.5000,false\n"
            "2,2.0000,0.0000,2.0000,false\n"
        ), csv_output)

    def test__sample3__output_matches_expected(self):
        # disputes, chargebacks, locked accounts, malformed rows and invalid state attempts
        _, csv_output = self.run_main("sample3.csv")
        self.assertEqual((
            "client,available,held,total,locked\n"
            "1,129.6234,0.0000,129.6234,false\n"
            "2,0.0000,0.0000,0.0000,true\n"
            "3,3.5000,0.0000,3.5000,false\n"
            "5,0.0000,7.2500,7.2500,false\n"
        ), csv_output)

        with open(self.log_file) as f:
            log_output = f.read()
        self.assertEqual(3, log_output.count("field format error"))
        self.assertIn("tx_id 4, client_id 1, failed to apply withdrawal of $1000.0000: nsf", log_output)
        self.assertIn("tx_id 6, client_id 2, failed to apply deposit of $5.0000: account is locked", log_output)
        self.assertIn("tx_id 1, client_id 3, failed to apply dispute: tx client_id mismatch", log_output)
        self.assertIn("tx_id 11, client_id 4, failed to apply deposit of $9.0000: deposit duplicates existing tx_id", log_output)
        self.assertIn("tx_id 99, client_id 5, failed to apply dispute: tx not found", log_output)

    def test__undecodable_row_mid_stream__remaining_rows_applied(self):
        status, csv_output = self.run_main("sample4.csv")
        self.assertEqual(0, status)
        self.assertEqual((
            "client,available,held,total,locked\n"
            "1,1.0000,0.0000,1.0000,false\n"
            "3,2.0000,0.0000,2.0000,false\n"
        ), csv_output)

        with open(self.log_file, encoding="utf-8") as f:
            self.assertEqual(1, f.read().count("field format error"))

    def test__large_amounts__output_keeps_four_digits(self):
        status, csv_output = self.run_main("large_amounts.csv")
        self.assertEqual(0, status)
        self.assertEqual((
            "client,available,held,total,locked\n"
            "1,1800000000000000000000000.0000,0.0000,1800000000000000000000000.0000,false\n"
        ), csv_output)

    def test__logger_level__restored_after_run(self):
        package_logger = logging.getLogger("payment_engine")
        previous_level = package_logger.level
        handlers = list(package_logger.handlers)
        self.run_main("sample1.csv")
        self.assertEqual(previous_level, package_logger.level)
        self.assertEqual(handlers, package_logger.handlers)

    def test__missing_input__fails(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            status = main([os.path.join(self.tmpdir, "nope.csv"), "--log-file", self.log_file], stdout=io.StringIO())
        self.assertEqual(1, status)
        self.assertIn("unable to open input file", stderr.getvalue())

    def test__unwritable_log_file__fails(self):
        stderr = io.StringIO()
        log_file = os.path.join(self.tmpdir, "missing_dir", "log.txt")
        with redirect_stderr(stderr):
            status = main([os.path.join(FIXTURES, "sample1.csv"), "--log-file", log_file], stdout=io.StringIO())
        self.assertEqual(1, status)
        self.assertIn("unable to open log file", stderr.getvalue())


if __name__ == '__main__':
    unittest.main()
