import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from sim import main

TRACE = """\
0x0040f2a8: W 0x00004000
0x0040f2ac: W 0x00004000
0x0040f2b0: R 0x00008000
#eof
"""


class TestSimCommand(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write_trace(self, text):
        path = os.path.join(self.tmp.name, "trace.txt")
        with open(path, "w") as f:
            f.write(text)
        return path

    def run_main(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_write_through_report(self):
        code, out, _ = self.run_main(["wt", self.write_trace(TRACE)])
        self.assertEqual(code, 0)
        self.assertEqual(out, "CACHE HITS: 1\nCACHE MISSES: 2\nMEMORY READS: 2\nMEMORY WRITES: 1\n")

    def test_write_back_report(self):
        code, out, _ = self.run_main(["wb", self.write_trace(TRACE)])
        self.assertEqual(code, 0)
        self.assertEqual(out, "CACHE HITS: 1\nCACHE MISSES: 2\nMEMORY READS: 2\nMEMORY WRITES: 0\n")

    def test_invalid_write_policy(self):
        code, out, err = self.run_main(["wx", self.write_trace(TRACE)])
        self.assertEqual(code, 2)
        self.assertEqual(out, "")
        self.assertIn("Invalid Write Policy.", err)

    def test_missing_file(self):
        code, out, err = self.run_main(["wt", os.path.join(self.tmp.name, "missing.txt")])
        self.assertEqual(code, 1)
        self.assertIn("Error: Could not open file.", err)

    def test_malformed_record_has_no_report(self):
        code, out, _ = self.run_main(["wt", self.write_trace(TRACE.replace("#eof", "0x0040f2b4: X 0x0"))])
        self.assertEqual(code, 1)
        self.assertEqual(out, "3: ERROR!!!!\n")

    def test_cache_geometry_options(self):
        code, out, _ = self.run_main(["wt", "--cache-size", "4", "--block-size", "4", self.write_trace(TRACE)])
        self.assertEqual(code, 0)
        self.assertIn("CACHE MISSES: 2\nMEMORY READS: 1\n", out)

    def test_invalid_cache_size(self):
        code, out, err = self.run_main(["wt", "--cache-size", "0", self.write_trace(TRACE)])
        self.assertEqual(code, 2)
        self.assertIn("Invalid cache parameters.", err)

    def test_dump(self):
        code, out, _ = self.run_main(["wb", "--cache-size", "8", "--dump", self.write_trace(TRACE)])
        self.assertEqual(code, 0)
        self.assertIn("[0]: { valid: 1, tag: 000000000000000001 }", out)
        self.assertIn("[1]: { valid: 1, tag: 000000000000000010 }", out)

    def test_non_ascii_bytes_in_trace(self):
        path = os.path.join(self.tmp.name, "trace.txt")
        with open(path, "wb") as f:
            f.write(b"# caf\xe9 trace\n0x0: W 0x00004000\n0x0: W 0x00004000\n")
        code, out, _ = self.run_main(["wt", path])
        self.assertEqual(code, 0)
        self.assertEqual(out, "CACHE HITS: 1\nCACHE MISSES: 1\nMEMORY READS: 1\nMEMORY WRITES: 1\n")

    def test_lru_eviction_option(self):
        code, out, _ = self.run_main(["wb", "--cache-size", "4", "--eviction", "lru", self.write_trace(TRACE)])
        self.assertEqual(code, 0)
        # the dirty line for 0x4000 is written back when 0x8000 replaces it
        self.assertEqual(out, "CACHE HITS: 1\nCACHE MISSES: 2\nMEMORY READS: 2\nMEMORY WRITES: 1\n")

    def test_debug_option(self):
        with self.assertLogs("cachesim", level="DEBUG") as logs:
            code, out, _ = self.run_main(["wt", "--debug", self.write_trace(TRACE)])
        self.assertEqual(code, 0)
        self.assertIn("DEBUG:cachesim:0: W 0x00004000", logs.output)
        self.assertIn("DEBUG:cachesim:Num Lines: 3", logs.output)
        self.assertTrue(out.startswith("CACHE HITS: 1\n"))

    def test_help(self):
        with self.assertRaises(SystemExit) as ctx:
            self.run_main(["-h"])
        self.assertEqual(ctx.exception.code, 0)

if __name__ == "__main__":
    unittest.main()
