import contextlib
import io
import threading
import unittest

from copycheck import Match, StandardOutput

from .test_utils import CollectingOutput, make_digested


class StandardOutputTest(unittest.TestCase):
    def test_channels(self):
        a = make_digested('a.txt', b'hello', 1)
        c = make_digested('c.txt', b'hello', 3)
        stdout, stderr = io.StringIO(), io.StringIO()

        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            output = StandardOutput()
            output.describe_comparison(a, c)
            output.describe_match(Match(a, c))

        self.assertEqual("These are same: a.txt, c.txt\n", stdout.getvalue())
        self.assertEqual("check between 'a.txt', 'c.txt'\n", stderr.getvalue())

    def test_lines_stay_whole_under_concurrent_writers(self):
        stdout = io.StringIO()
        output = StandardOutput()
        pairs = [(make_digested(f'src{i}', b'x', i), make_digested(f'dst{i}', b'x', 1000 + i)) for i in range(50)]

        def write(pair):
            for _ in range(20):
                output.describe_match(Match(*pair))

        with contextlib.redirect_stdout(stdout):
            threads = [threading.Thread(target=write, args=(pair,)) for pair in pairs]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        lines = stdout.getvalue().splitlines()
        self.assertEqual(50 * 20, len(lines))
        self.assertEqual({f"These are same: src{i}, dst{i}" for i in range(50)}, set(lines))


class OutputTest(unittest.TestCase):
    def test_quiet(self):
        output = CollectingOutput()
        output.quiet = True
        a = make_digested('a', b'x', 1)
        b = make_digested('b', b'x', 2)

        output.describe_comparison(a, b)
        output.describe_match(Match(a, b))

        self.assertEqual([], output.diagnostics)
        self.assertEqual(["These are same: a, b"], output.results)


if __name__ == '__main__':
    unittest.main()
