from __future__ import annotations

import contextlib
import importlib.util
import io
import unittest
from unittest import mock


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for command-line tests")
class CommandLineTests(unittest.TestCase):
    def _run(self, *argv: str, stdin: str | None = None) -> tuple[int, str, str]:
        from kuhi.cli import main

        out, err = io.StringIO(), io.StringIO()
        with contextlib.ExitStack() as stack:
            stack.enter_context(contextlib.redirect_stdout(out))
            stack.enter_context(contextlib.redirect_stderr(err))
            if stdin is not None:
                stack.enter_context(mock.patch("sys.stdin", io.StringIO(stdin)))
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_single_expression(self) -> None:
        code, out, err = self._run("-e", "+ 1 2")
        self.assertEqual(code, 0)
        self.assertEqual(out, "3\n")
        self.assertEqual(err, "")

    def test_lines_share_one_stack(self) -> None:
        code, out, _ = self._run("-e", "1 2", "-e", "+")
        self.assertEqual(code, 0)
        self.assertEqual(out, "1\n2\n3\n")

    def test_stdin_lines(self) -> None:
        code, out, _ = self._run(stdin="1\n+ 2\n")
        self.assertEqual(code, 0)
        self.assertEqual(out, "1\n3\n")

    def test_mnemonics_are_formatted_by_default(self) -> None:
        code, out, _ = self._run("-e", "+ pi pi")
        self.assertEqual(code, 0)
        self.assertEqual(out, "2π\n")

    def test_no_format_runs_source_verbatim(self) -> None:
        code, out, err = self._run("--no-format", "-e", "pi")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("runtime error: function `p` not found at line 1, column 1", err)
        self.assertIn("note: check the docs for a list of functions", err)

    def test_syntax_error_stops_the_run(self) -> None:
        code, out, err = self._run("-e", "1", "-e", "(", "-e", "2")
        self.assertEqual(code, 1)
        self.assertEqual(out, "1\n")
        self.assertIn("syntax error: unmatched parenthesis at line 2, column 1", err)
        self.assertIn("missing closing parenthesis", err)

    def test_numbers_beyond_double_range_do_not_crash(self) -> None:
        code, out, err = self._run("-e", "◯ ⁿ 400 10")
        self.assertEqual(code, 0)
        self.assertEqual(out, "NaN\n")
        self.assertEqual(err, "")

    def test_token_dump(self) -> None:
        code, out, _ = self._run("--tokens", "-e", "+ 1")
        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), ["0:1\tCall(symbol='+')", "2:3\tInteger(value=1)"])


if __name__ == "__main__":
    unittest.main()
