"""
Unit tests for the satlab command-line driver.
"""

import io
import logging
import os
import shutil
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from satlab.cli import main, render_report
from satlab.solvers import SolverRegistry, SolverResult, SolverStatus
from satlab.solvers import config as config_module
from satlab.utils.logging_utils import PACKAGE_LOGGER


class TestRenderReport(unittest.TestCase):
    """Test cases for the human readable report."""

    def test_satisfiable(self):
        result = SolverResult(SolverStatus.SATISFIABLE, solution=[1, -2], runtime=0.5, steps=2)
        report = render_report(result, "dpll")
        self.assertIn("Solution found with DPLL!", report)
        self.assertIn("P1=true P2=false", report)
        self.assertIn("Time spent: 0.500000 secs", report)
        self.assertIn("Number of steps: 2", report)

    def test_unsatisfiable(self):
        result = SolverResult(SolverStatus.UNSATISFIABLE, steps=3)
        self.assertIn("There is no solution to the problem...", render_report(result, "dpll"))

    def test_timeout(self):
        result = SolverResult(SolverStatus.TIMEOUT, steps=20000)
        report = render_report(result, "walksat")
        self.assertIn("NO SOLUTION found with WalkSAT...", report)
        self.assertIn("Number of steps: 20000", report)


class TestCommands(unittest.TestCase):
    """Test cases for the subcommands."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.saved_config = config_module.config

    def tearDown(self):
        config_module.config = self.saved_config
        SolverRegistry.set_default("dpll")
        logger = logging.getLogger(PACKAGE_LOGGER)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
        shutil.rmtree(self.test_dir)

    def run_cli(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def path(self, name):
        return os.path.join(self.test_dir, name)

    def write_problem(self, name, content):
        path = self.path(name)
        with open(path, "w") as f:
            f.write(content)
        return path

    def test_solve_dpll(self):
        problem = self.write_problem("xor.txt", "2 2 2\n1 2\n-1 -2\n")
        output = self.path("solution.txt")
        code, out, _ = self.run_cli("solve", "dpll", problem, output, "--log-level", "ERROR")

        self.assertEqual(code, 0)
        self.assertIn("Solution found with DPLL!", out)
        with open(output) as f:
            self.assertIn(f.read().split(), (["1", "-1"], ["-1", "1"]))

        code, out, _ = self.run_cli("verify", problem, output, "--log-level", "ERROR")
        self.assertEqual(code, 0)
        self.assertIn("Satisfied clauses: 2/2", out)

    def test_solve_unsatisfiable(self):
        problem = self.write_problem("contradiction.txt", "1 2 2\n1 1\n-1 -1\n")
        output = self.path("solution.txt")
        code, out, _ = self.run_cli("solve", "dpll", problem, output, "--log-level", "ERROR")

        self.assertEqual(code, 0)
        self.assertIn("There is no solution to the problem...", out)
        self.assertFalse(os.path.exists(output))

    def test_solve_walk(self):
        problem = self.write_problem("one.txt", "2 1 2\n1 2\n")
        output = self.path("solution.txt")
        code, out, _ = self.run_cli(
            "solve", "walk", problem, output, "--max-steps", "10", "--seed", "3",
            "--log-level", "ERROR",
        )
        self.assertEqual(code, 0)
        self.assertIn("Solution found with WalkSAT!", out)
        self.assertTrue(os.path.exists(output))

    def test_missing_input(self):
        code, _, err = self.run_cli(
            "solve", "dpll", self.path("missing.txt"), self.path("out.txt"), "--log-level", "CRITICAL"
        )
        self.assertEqual(code, 1)
        self.assertIn("Cannot open input file", err)

    def test_parse_error_reported(self):
        problem = self.write_problem("bad.txt", "2 1 2\n1 9\n")
        code, _, err = self.run_cli(
            "solve", "dpll", problem, self.path("out.txt"), "--log-level", "CRITICAL"
        )
        self.assertEqual(code, 1)
        self.assertIn("Wrong value for the #2 proposition of the #1 sentence", err)

    def test_unwritable_output_keeps_report(self):
        problem = self.write_problem("xor.txt", "2 2 2\n1 2\n-1 -2\n")
        output = self.path(os.path.join("no_such_dir", "solution.txt"))
        code, out, err = self.run_cli("solve", "dpll", problem, output, "--log-level", "CRITICAL")

        self.assertEqual(code, 1)
        self.assertIn("Solution found with DPLL!", out)
        self.assertIn("Cannot write solution file", err)

    def test_generate(self):
        prefix = self.path("gen")
        code, out, _ = self.run_cli("generate", "12", "5", "3", "2", prefix, "--seed", "1",
                                    "--log-level", "ERROR")
        self.assertEqual(code, 0)
        self.assertEqual(out.split(), [f"{prefix}_1.txt", f"{prefix}_2.txt"])
        with open(f"{prefix}_1.txt") as f:
            self.assertEqual(f.readline().split(), ["5", "12", "3"])

    def test_configured_method(self):
        config_path = self.write_problem(
            "config.yaml",
            "solver:\n  name: walksat\n  walksat:\n    seed: 3\nlogging:\n  level: ERROR\n",
        )
        problem = self.write_problem("one.txt", "2 1 2\n1 2\n")
        code, out, _ = self.run_cli("solve", problem, self.path("out.txt"), "--config", config_path)
        self.assertEqual(code, 0)
        self.assertIn("Solution found with WalkSAT!", out)

        # An explicit method still wins over the configured one.
        code, out, _ = self.run_cli("solve", "dpll", problem, self.path("out.txt"),
                                    "--config", config_path)
        self.assertEqual(code, 0)
        self.assertIn("Solution found with DPLL!", out)

    def test_unknown_configured_method(self):
        config_path = self.write_problem("config.yaml", "solver:\n  name: cdcl\n")
        problem = self.write_problem("one.txt", "2 1 2\n1 2\n")
        code, _, err = self.run_cli("solve", problem, self.path("out.txt"),
                                    "--config", config_path, "--log-level", "CRITICAL")
        self.assertEqual(code, 1)
        self.assertIn("Unknown solver 'cdcl'", err)

    def test_unknown_log_level(self):
        problem = self.write_problem("one.txt", "2 1 2\n1 2\n")
        code, _, err = self.run_cli("solve", "dpll", problem, self.path("out.txt"),
                                    "--log-level", "bogus")
        self.assertEqual(code, 1)
        self.assertIn("Unknown logging level: bogus", err)
        self.assertNotIn("Traceback", err)

    def test_generate_configured_sizes(self):
        config_path = self.write_problem(
            "config.yaml",
            "generator:\n  num_variables: 6\n  num_clauses: 9\n  clause_width: 2\n  seed: 4\n"
            "logging:\n  level: ERROR\n",
        )
        prefix = self.path("cfg")
        code, out, _ = self.run_cli("generate", "1", prefix, "--config", config_path)
        self.assertEqual(code, 0)
        self.assertEqual(out.split(), [f"{prefix}_1.txt"])
        with open(f"{prefix}_1.txt") as f:
            self.assertEqual(f.readline().split(), ["6", "9", "2"])

    def test_generate_rejects_wide_clauses(self):
        code, _, err = self.run_cli("generate", "4", "2", "3", "1", self.path("gen"),
                                    "--log-level", "CRITICAL")
        self.assertEqual(code, 1)
        self.assertIn("exceeds the number of variables", err)

    def test_verify_rejects_wrong_solution(self):
        problem = self.write_problem("xor.txt", "2 2 2\n1 2\n-1 -2\n")
        solution = self.write_problem("solution.txt", "1 1\n")
        code, out, _ = self.run_cli("verify", problem, solution, "--log-level", "ERROR")
        self.assertEqual(code, 1)
        self.assertIn("does NOT satisfy", out)

    def test_compare(self):
        self.run_cli("generate", "20", "8", "3", "2", self.path("cmp"), "--seed", "2",
                     "--log-level", "ERROR")
        code, out, _ = self.run_cli(
            "compare", self.test_dir, "--runs", "2", "--max-steps", "1000", "--seed", "0",
            "--out-dir", self.path("records"), "--log-level", "ERROR",
        )
        self.assertEqual(code, 0)
        self.assertIn("dpll", out)
        self.assertIn("walksat", out)
        self.assertTrue(os.path.exists(self.path(os.path.join("records", "default_metadata.json"))))

    def test_compare_configured_experiment(self):
        problems = os.path.join(self.test_dir, "problems")
        os.mkdir(problems)
        self.run_cli("generate", "20", "8", "3", "2", os.path.join(problems, "cmp"), "--seed", "2",
                     "--log-level", "ERROR")
        with open(os.path.join(problems, "cmp_1_solution.txt"), "w") as f:
            f.write("1 -1 1 -1 1 -1 1 -1\n")
        records = self.path("records")
        config_path = self.write_problem(
            "config.yaml",
            f"experiment:\n  name: cfg\n  runs: 3\n  results_dir: {records}\n"
            "logging:\n  level: ERROR\n",
        )

        code, out, _ = self.run_cli("compare", problems, "--max-steps", "500", "--seed", "0",
                                    "--config", config_path)
        self.assertEqual(code, 0)
        table = {line.split()[0]: line.split() for line in out.splitlines()[1:]}
        self.assertEqual(table["dpll"][1], "2")
        self.assertEqual(table["walksat"][1], "6")
        self.assertTrue(os.path.exists(os.path.join(records, "cfg_metadata.json")))

    def test_config_file(self):
        config_path = self.write_problem("config.yaml", "logging:\n  level: ERROR\n")
        problem = self.write_problem("one.txt", "2 1 2\n1 2\n")
        code, _, _ = self.run_cli("solve", "dpll", problem, self.path("out.txt"),
                                  "--config", config_path)
        self.assertEqual(code, 0)
        self.assertEqual(logging.getLogger(PACKAGE_LOGGER).level, logging.ERROR)

    def test_no_command(self):
        code, out, _ = self.run_cli()
        self.assertEqual(code, 2)
        self.assertIn("usage", out)


if __name__ == "__main__":
    unittest.main()
