#!/usr/bin/env python3
"""
forksh Process Tests

Tests that run real child processes: dispatch, redirection, built-ins
and the interactive loop. Each test runs inside its own temporary
working directory and relies on standard tools (echo, sort, cat).

Run with: python -m pytest forksh/tests/process_tests.py -v
Or: python forksh/tests/process_tests.py

Author: YSNRFD
Version: 1.0.0
"""

import contextlib
import io
import json
import os
import subprocess
import sys
import tempfile
import unittest
from unittest import mock

# Add repository root to path
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, REPO_ROOT)

MISSING_PROGRAM = "forksh-test-no-such-program"


class WorkdirTestCase(unittest.TestCase):
    """Runs each test in a fresh temporary directory."""

    def setUp(self):
        self._old_cwd = os.getcwd()
        self._tmp = tempfile.TemporaryDirectory()
        self.workdir = os.path.realpath(self._tmp.name)
        os.chdir(self.workdir)

    def tearDown(self):
        os.chdir(self._old_cwd)
        self._tmp.cleanup()

    def write(self, name, content):
        with open(os.path.join(self.workdir, name), "w") as f:
            f.write(content)

    def read(self, name):
        with open(os.path.join(self.workdir, name)) as f:
            return f.read()

    def exists(self, name):
        return os.path.exists(os.path.join(self.workdir, name))

    def capture(self, func, *args):
        """Call func and return (result, text written to stdout)."""
        buffer = io.StringIO()
        with contextlib.redirect_stdout(buffer):
            result = func(*args)
        return result, buffer.getvalue()


class TestDispatcher(WorkdirTestCase):
    """Test command execution."""

    def setUp(self):
        super().setUp()
        from forksh.shell.dispatcher import Dispatcher
        self.dispatcher = Dispatcher()

    def test_empty_is_noop(self):
        from forksh.shell.command import Empty

        self.assertIsNone(self.dispatcher.execute(Empty()))

    def test_output_redirect(self):
        from forksh.shell.command import Tokens, OutputRedirect

        self.dispatcher.execute(OutputRedirect("out.txt", Tokens(["echo", "hello"])))
        self.assertEqual(self.read("out.txt"), "hello\n")

    def test_output_redirect_truncates(self):
        from forksh.shell.command import Tokens, OutputRedirect

        self.write("out.txt", "old content that is longer\n")
        self.dispatcher.execute(OutputRedirect("out.txt", Tokens(["echo", "new"])))
        self.assertEqual(self.read("out.txt"), "new\n")

    def test_input_and_output_redirect(self):
        from forksh.shell.parser import parse

        self.write("in.txt", "banana\napple\n")
        for command in parse("sort < in.txt > out.txt"):
            self.dispatcher.execute(command)
        self.assertEqual(self.read("out.txt"), "apple\nbanana\n")

    def test_operator_order_gives_same_result(self):
        from forksh.shell.parser import parse

        self.write("in.txt", "b\na\n")
        for command in parse("sort > out.txt < in.txt"):
            self.dispatcher.execute(command)
        self.assertEqual(self.read("out.txt"), "a\nb\n")

    def test_missing_input_still_runs_command(self):
        from forksh.shell.command import Tokens, InputRedirect, OutputRedirect

        self.dispatcher.execute(
            OutputRedirect("out.txt", InputRedirect("missing.txt", Tokens(["echo", "still runs"])))
        )
        self.assertIn("still runs", self.read("out.txt"))

    def test_parent_descriptors_untouched(self):
        from forksh.shell.command import Tokens, InputRedirect, OutputRedirect

        self.write("in.txt", "x\n")
        before = (os.fstat(0).st_ino, os.fstat(1).st_ino)
        self.dispatcher.execute(OutputRedirect("out.txt", InputRedirect("in.txt", Tokens(["cat"]))))
        after = (os.fstat(0).st_ino, os.fstat(1).st_ino)

        self.assertEqual(before, after)
        self.assertEqual(self.read("out.txt"), "x\n")

    def test_exec_failure_does_not_reach_parent(self):
        from forksh.shell.command import Tokens, OutputRedirect

        self.dispatcher.execute(OutputRedirect("err.txt", Tokens([MISSING_PROGRAM])))
        self.dispatcher.execute(OutputRedirect("ok.txt", Tokens(["echo", "after"])))

        self.assertTrue(self.exists("err.txt"))
        self.assertEqual(self.read("ok.txt"), "after\n")

    def test_exec_failure_report(self):
        from forksh.shell.command import Tokens
        from forksh.shell.dispatcher import EXIT_NOT_FOUND

        with mock.patch('forksh.shell.dispatcher.os.execvp',
                        side_effect=FileNotFoundError(2, 'No such file or directory')):
            status, text = self.capture(self.dispatcher._exec, Tokens([MISSING_PROGRAM]))

        self.assertEqual(status, EXIT_NOT_FOUND)
        self.assertIn(MISSING_PROGRAM, text)
        self.assertIn("No such file or directory", text)

    def test_bind_failure_uses_null_device(self):
        from forksh.shell.dispatcher import INPUT_FLAGS

        self.write("scratch.txt", "scratch contents\n")
        spare = os.open("scratch.txt", os.O_RDONLY)
        try:
            _, text = self.capture(self.dispatcher._bind, spare, "missing.txt", INPUT_FLAGS)

            self.assertIn("missing.txt", text)
            self.assertTrue(os.path.samestat(os.fstat(spare), os.stat(os.devnull)))
            self.assertEqual(os.read(spare, 64), b"")
        finally:
            os.close(spare)

    def test_fork_failure(self):
        from forksh.shell.command import Tokens
        from forksh.exceptions import SpawnError

        with mock.patch('forksh.shell.dispatcher.os.fork',
                        side_effect=OSError(11, 'Resource temporarily unavailable')):
            with self.assertRaises(SpawnError):
                self.dispatcher.execute(Tokens(["ls"]))

            ok, text = self.capture(self.dispatcher.execute_safely, Tokens(["ls"]))

        self.assertFalse(ok)
        self.assertIn("fork failed", text)

    def test_wait_missing_child(self):
        from forksh.exceptions import ChildWaitError

        with mock.patch('forksh.shell.dispatcher.os.waitpid',
                        side_effect=ChildProcessError(10, 'No child processes')):
            with self.assertRaises(ChildWaitError):
                self.dispatcher._wait(12345)

    def test_wait_failure_is_fatal(self):
        from forksh.exceptions import ShellPanic

        with mock.patch('forksh.shell.dispatcher.os.waitpid',
                        side_effect=OSError(22, 'Invalid argument')):
            with self.assertRaises(ShellPanic):
                self.dispatcher._wait(12345)

    def test_execute_all_continues_after_failure(self):
        from forksh.shell.parser import parse

        _, text = self.capture(
            self.dispatcher.execute_all,
            parse("cd missing-dir ; echo done > done.txt")
        )
        self.assertIn("missing-dir", text)
        self.assertEqual(self.read("done.txt"), "done\n")


class TestBuiltins(WorkdirTestCase):
    """Test cd, source and help."""

    def setUp(self):
        super().setUp()
        from forksh.core.config_loader import ShellConfig
        from forksh.shell.dispatcher import Dispatcher

        self.config = ShellConfig(max_source_depth=3)
        self.dispatcher = Dispatcher(self.config)

    def run_line(self, line):
        from forksh.shell.parser import parse
        return self.capture(self.dispatcher.execute_all, parse(line))[1]

    def test_builtin_names(self):
        self.assertEqual(self.dispatcher.builtins.names, {"cd", "source", "help"})
        self.assertFalse(self.dispatcher.builtins.is_builtin("ls"))

    def test_cd(self):
        os.mkdir("sub")
        self.run_line("cd sub")
        self.assertEqual(os.getcwd(), os.path.join(self.workdir, "sub"))

    def test_cd_failure_keeps_directory(self):
        text = self.run_line("cd does-not-exist")
        self.assertEqual(os.getcwd(), self.workdir)
        self.assertIn("cd:", text)
        self.assertIn("Path was does-not-exist", text)

    def test_cd_without_argument_goes_home(self):
        os.mkdir("home")
        home = os.path.join(self.workdir, "home")
        with mock.patch.dict(os.environ, {'HOME': home}):
            self.run_line("cd")
        self.assertEqual(os.getcwd(), home)

    def test_cd_inside_redirect_does_not_affect_shell(self):
        os.mkdir("sub")
        self.run_line("cd sub > out.txt")
        self.assertEqual(os.getcwd(), self.workdir)

    def test_source_runs_lines_in_order(self):
        self.write("script.sh", "echo one > a.txt\necho two > b.txt ; cat a.txt b.txt > c.txt\n")
        self.run_line("source script.sh")
        self.assertEqual(self.read("c.txt"), "one\ntwo\n")

    def test_source_continues_after_failed_command(self):
        self.write("script.sh", f"{MISSING_PROGRAM} > log1.txt\necho second > log2.txt\n")
        self.run_line("source script.sh")
        self.assertTrue(self.exists("log1.txt"))
        self.assertEqual(self.read("log2.txt"), "second\n")

    def test_source_skips_blank_and_comment_lines(self):
        self.write("script.sh", "# comment\n\necho ok > ok.txt\n")
        self.run_line("source script.sh")
        self.assertEqual(self.read("ok.txt"), "ok\n")

    def test_source_stops_at_parse_error(self):
        self.write("script.sh", 'echo one > a.txt\necho "bad\necho three > c.txt\n')
        text = self.run_line("source script.sh")

        self.assertTrue(self.exists("a.txt"))
        self.assertFalse(self.exists("c.txt"))
        self.assertIn("script.sh:2", text)

    def test_source_missing_file(self):
        status, text = self.capture(self.dispatcher.builtins.execute, "source", ["nope.sh"])
        self.assertEqual(status, 1)
        self.assertIn("nope.sh", text)

    def test_source_without_argument(self):
        status, text = self.capture(self.dispatcher.builtins.execute, "source", [])
        self.assertEqual(status, 2)
        self.assertIn("usage", text)

    def test_nested_source(self):
        self.write("inner.sh", "echo inner > inner.txt\n")
        self.write("outer.sh", "source inner.sh\necho outer > outer.txt\n")
        self.run_line("source outer.sh")
        self.assertEqual(self.read("inner.txt"), "inner\n")
        self.assertEqual(self.read("outer.txt"), "outer\n")

    def test_source_recursion_limit(self):
        self.write("loop.sh", "source loop.sh\n")
        text = self.run_line("source loop.sh")
        self.assertIn("nested too deeply", text)

    def test_help(self):
        from forksh.shell.builtins import load_help_text

        status, text = self.capture(self.dispatcher.builtins.execute, "help", [])
        self.assertEqual(status, 0)
        self.assertEqual(text, load_help_text(self.config.help_path))
        self.assertIn("source", text)

    def test_help_missing_file(self):
        self.config.help_file = os.path.join(self.workdir, "no-help.txt")
        status, text = self.capture(self.dispatcher.builtins.execute, "help", [])
        self.assertEqual(status, 1)
        self.assertIn("no-help.txt", text)


class TestShell(WorkdirTestCase):
    """Test the interactive loop."""

    def setUp(self):
        super().setUp()
        from forksh.core.config_loader import ShellConfig
        from forksh.shell.shell import Shell

        self.shell = Shell(ShellConfig(show_help_on_start=False))

    def run_line(self, line):
        return self.capture(self.shell.execute_line, line)[1]

    def test_prev_without_history(self):
        from forksh.shell.command import Empty

        text = self.run_line("prev")
        self.assertEqual(text, "")
        self.assertEqual(self.shell.previous, Empty())
        self.assertFalse(self.shell.exiting)

    def test_prev_repeats_last_command(self):
        self.run_line("echo again > p.txt")
        os.remove("p.txt")

        remembered = self.shell.previous
        self.run_line("PREV")

        self.assertEqual(self.read("p.txt"), "again\n")
        self.assertEqual(self.shell.previous, remembered)

    def test_builtins_not_remembered(self):
        from forksh.shell.command import Tokens

        os.mkdir("sub")
        self.run_line("echo x")
        self.run_line("cd sub")
        self.assertEqual(self.shell.previous, Tokens(["echo", "x"]))

    def test_last_segment_remembered(self):
        from forksh.shell.command import Tokens, OutputRedirect

        self.run_line("echo a > a.txt ; echo b > b.txt")
        self.assertEqual(self.shell.previous, OutputRedirect("b.txt", Tokens(["echo", "b"])))

    def test_sequence_independence(self):
        self.run_line(f"{MISSING_PROGRAM} ; echo ok > ok.txt")
        self.assertEqual(self.read("ok.txt"), "ok\n")

    def test_parse_error_reported(self):
        from forksh.shell.command import Empty

        text = self.run_line("> out")
        self.assertIn("no command before redirection", text)
        self.assertFalse(self.exists("out"))
        self.assertEqual(self.shell.previous, Empty())

    def test_pipe_reported(self):
        text = self.run_line("ls | wc")
        self.assertIn("pipelines are not supported", text)

    def test_quit(self):
        text = self.run_line("Quit")
        self.assertEqual(text, "Goodbye\n")
        self.assertTrue(self.shell.exiting)

    def test_run_after_quit_does_not_prompt(self):
        self.run_line("quit")
        with mock.patch('builtins.input') as prompt:
            status, _ = self.capture(self.shell.run)

        self.assertEqual(status, 0)
        prompt.assert_not_called()

    def test_help_line(self):
        text = self.run_line("help")
        self.assertIn("prev", text)

    def test_run_loop(self):
        with mock.patch('builtins.input', side_effect=["echo hi > r.txt", "quit", "echo never > n.txt"]):
            status, text = self.capture(self.shell.run)

        self.assertEqual(status, 0)
        self.assertEqual(self.read("r.txt"), "hi\n")
        self.assertFalse(self.exists("n.txt"))
        self.assertIn("Goodbye", text)

    def test_run_loop_end_of_input(self):
        with mock.patch('builtins.input', side_effect=EOFError):
            status, _ = self.capture(self.shell.run)
        self.assertEqual(status, 0)

    def test_run_loop_interrupt_at_prompt(self):
        with mock.patch('builtins.input', side_effect=[KeyboardInterrupt, "quit"]):
            status, text = self.capture(self.shell.run)
        self.assertEqual(status, 0)
        self.assertIn("^C", text)

    def test_run_script(self):
        self.write("script.sh", "echo scripted > s.txt\n")
        status, _ = self.capture(self.shell.run_script, "script.sh")
        self.assertEqual(status, 0)
        self.assertEqual(self.read("s.txt"), "scripted\n")


class TestMain(WorkdirTestCase):
    """Test the entry point."""

    def setUp(self):
        super().setUp()
        self.write("config.json", json.dumps({
            "shell": {"show_help_on_start": False},
            "logging": {"level": "ERROR", "console_output": False},
        }))

    def tearDown(self):
        from forksh.core.config_loader import ConfigLoader
        ConfigLoader().reset()
        super().tearDown()

    def test_script_mode(self):
        from forksh.main import main

        self.write("script.sh", "echo from-main > m.txt\n")
        status, _ = self.capture(main, ["--config", "config.json", "script.sh"])

        self.assertEqual(status, 0)
        self.assertEqual(self.read("m.txt"), "from-main\n")

    def test_interactive_mode(self):
        from forksh.main import main

        with mock.patch('builtins.input', side_effect=["quit"]):
            status, text = self.capture(main, ["--config", "config.json"])

        self.assertEqual(status, 0)
        self.assertIn("Goodbye", text)

    def test_bad_config(self):
        from forksh.main import main

        with contextlib.redirect_stderr(io.StringIO()):
            self.assertEqual(main(["--config", "missing.json"]), 2)

    def test_show_config(self):
        from forksh.main import main

        status, text = self.capture(main, ["--config", "config.json", "--show-config"])

        self.assertEqual(status, 0)
        data = json.loads(text)
        self.assertFalse(data["shell"]["show_help_on_start"])
        self.assertEqual(data["logging"]["level"], "ERROR")
        self.assertEqual(data["shell"]["prompt"], "shell $ ")

    def test_show_config_with_script_is_usage_error(self):
        from forksh.main import main

        with contextlib.redirect_stderr(io.StringIO()):
            self.assertEqual(main(["--config", "config.json", "--show-config", "script.sh"]), 2)

    def test_usage(self):
        from forksh.main import main

        status, text = self.capture(main, ["--help"])
        self.assertEqual(status, 0)
        self.assertIn("usage", text)


class TestRedirectFailure(WorkdirTestCase):
    """Failed redirections must not hand the shell's own streams to the command."""

    def setUp(self):
        super().setUp()
        self.write("config.json", json.dumps({
            "shell": {"show_help_on_start": False},
            "logging": {"level": "ERROR", "console_output": False},
        }))

    def run_forksh(self, script, stdin_data):
        """Run SCRIPT through a separate forksh process fed STDIN_DATA."""
        self.write("script.sh", script)
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(filter(None, [REPO_ROOT, env.get("PYTHONPATH")]))
        return subprocess.run(
            [sys.executable, "-m", "forksh.main", "--config", "config.json", "script.sh"],
            input=stdin_data,
            capture_output=True,
            text=True,
            cwd=self.workdir,
            env=env,
            timeout=30,
        )

    def test_missing_input_does_not_read_shell_stdin(self):
        result = self.run_forksh(
            "cat < missing.txt\necho after > ok.txt\n",
            "SHELL-STDIN-DATA\n"
        )

        self.assertEqual(result.returncode, 0)
        self.assertIn("missing.txt", result.stdout)
        self.assertNotIn("SHELL-STDIN-DATA", result.stdout)
        self.assertEqual(self.read("ok.txt"), "after\n")

    def test_unwritable_output_does_not_reach_shell_stdout(self):
        result = self.run_forksh(
            "echo SHOULD-NOT-APPEAR > nodir/out.txt\necho after > ok.txt\n",
            ""
        )

        self.assertEqual(result.returncode, 0)
        self.assertIn("nodir/out.txt", result.stdout)
        self.assertNotIn("SHOULD-NOT-APPEAR", result.stdout)
        self.assertFalse(self.exists("nodir"))
        self.assertEqual(self.read("ok.txt"), "after\n")


def run_tests():
    """Run all tests."""
    loader = unittest.TestLoader()
    suite = loader.loadTestsFromModule(sys.modules[__name__])

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return 0 if result.wasSuccessful() else 1


if __name__ == '__main__':
    sys.exit(run_tests())
