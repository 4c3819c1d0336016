"""
Unit tests for the solver comparison harness.
"""

import json
import os
import shutil
import tempfile
import unittest

from satlab.benchmark import find_problem_files, run_comparison, summarize
from satlab.utils.logging_utils import StructuredLogger
from satlab.utils.sat_generator import generate_problem_files


class TestComparison(unittest.TestCase):
    """Test cases for running both solvers over a set of problems."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.paths = generate_problem_files(
            2, os.path.join(self.test_dir, "p"), num_variables=10, num_clauses=30, seed=0
        )

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_find_problem_files(self):
        with open(os.path.join(self.test_dir, "notes.md"), "w") as f:
            f.write("not a problem")
        self.assertEqual(find_problem_files(self.test_dir), sorted(self.paths))
        self.assertEqual(find_problem_files(self.paths[0]), [self.paths[0]])

    def test_run_comparison(self):
        rows = run_comparison(self.paths, runs=3, max_steps=2000, seed=10)
        dpll_rows = [row for row in rows if row["solver"] == "dpll"]
        walksat_rows = [row for row in rows if row["solver"] == "walksat"]

        # DPLL is deterministic and runs once per problem.
        self.assertEqual(len(dpll_rows), 2)
        self.assertEqual(len(walksat_rows), 6)
        for row in rows:
            self.assertIn(row["status"], ("satisfiable", "unsatisfiable", "timeout"))
            if row["solver"] == "walksat":
                self.assertNotEqual(row["status"], "unsatisfiable")

        # A WalkSAT solution implies DPLL found one too.
        dpll_status = {row["file"]: row["status"] for row in dpll_rows}
        for row in walksat_rows:
            if row["status"] == "satisfiable":
                self.assertEqual(dpll_status[row["file"]], "satisfiable")

    def test_seeded_runs_are_reproducible(self):
        first = run_comparison(self.paths, runs=2, max_steps=500, seed=1, solvers=["walksat"])
        second = run_comparison(self.paths, runs=2, max_steps=500, seed=1, solvers=["walksat"])
        self.assertEqual(
            [row["steps"] for row in first], [row["steps"] for row in second]
        )

    def test_unparsable_files_are_skipped(self):
        # A solution file sitting next to the problems it solves.
        solution = os.path.join(self.test_dir, "p_1_solution.txt")
        with open(solution, "w") as f:
            f.write("1 -1 1\n")

        paths = find_problem_files(self.test_dir)
        self.assertIn(solution, paths)
        with self.assertLogs("satlab.benchmark", level="WARNING") as logs:
            rows = run_comparison(paths, runs=1, max_steps=100, seed=0)

        self.assertEqual({row["path"] for row in rows}, set(self.paths))
        self.assertEqual(len(rows), 4)
        self.assertTrue(any(solution in message for message in logs.output))

    def test_structured_records(self):
        logger = StructuredLogger(self.test_dir, "cmp")
        rows = run_comparison(self.paths, runs=1, max_steps=100, seed=0, structured_logger=logger)
        logger.close()

        with open(logger.path_for("solver_run")) as f:
            records = [json.loads(line) for line in f]
        self.assertEqual(len(records), len(rows))
        self.assertEqual({record["solver"] for record in records}, {"dpll", "walksat"})

    def test_summarize(self):
        rows = [
            {"solver": "dpll", "status": "satisfiable", "runtime_sec": 0.5, "steps": 10},
            {"solver": "dpll", "status": "unsatisfiable", "runtime_sec": 1.5, "steps": 30},
            {"solver": "walksat", "status": "timeout", "runtime_sec": 2.0, "steps": 100},
        ]
        summary = summarize(rows)
        self.assertEqual(list(summary), ["dpll", "walksat"])
        self.assertEqual(summary["dpll"]["runs"], 2)
        self.assertEqual(summary["dpll"]["solve_rate"], 0.5)
        self.assertEqual(summary["dpll"]["mean_runtime_sec"], 1.0)
        self.assertEqual(summary["dpll"]["mean_steps"], 20)
        self.assertEqual(summary["walksat"]["satisfiable"], 0)


if __name__ == "__main__":
    unittest.main()
