"""
Unit tests for the WalkSAT solver.
"""

import unittest

import numpy as np

from satlab.core import Formula, build_polarity_index
from satlab.exceptions import ConfigurationError
from satlab.solvers import SolverStatus, WalkSATSolver, dpll_solve, walksat_solve
from satlab.utils.sat_generator import generate_random_kcnf
from satlab.utils.seed import make_rng, rng_seed


class TestWalkSATSolver(unittest.TestCase):
    """Test cases for WalkSAT search."""

    def test_single_clause_solved_within_one_step(self):
        formula = Formula(2, [[1, 2]])
        for seed in range(200):
            result = walksat_solve(formula, max_steps=1, seed=seed)
            self.assertEqual(result.status, SolverStatus.SATISFIABLE, f"seed={seed}")
            self.assertLessEqual(result.steps, 1)
            self.assertTrue(formula.is_satisfied_by(result.assignment))

    def test_solutions_are_sound(self):
        solved = 0
        attempted = 0
        for seed in range(15):
            formula = generate_random_kcnf(20, 60, 3, seed=seed)
            if not dpll_solve(formula).is_sat:
                continue
            attempted += 1
            result = walksat_solve(formula, max_steps=5000, seed=seed)
            if result.is_sat:
                solved += 1
                self.assertTrue(formula.is_satisfied_by(result.assignment))
                self.assertEqual(result.satisfied_clauses, formula.num_clauses)
            else:
                self.assertEqual(result.status, SolverStatus.TIMEOUT)
        self.assertGreater(attempted, 0)
        self.assertGreaterEqual(solved / attempted, 0.8)

    def test_timeout_on_unsatisfiable(self):
        formula = Formula(1, [[1, 1], [-1, -1]])
        result = walksat_solve(formula, max_steps=50, seed=1)
        self.assertEqual(result.status, SolverStatus.TIMEOUT)
        self.assertEqual(result.steps, 50)
        self.assertEqual(result.satisfied_clauses, 1)
        self.assertIsNone(result.solution)
        self.assertFalse(result.is_unsat)

    def test_zero_budget(self):
        formula = Formula(1, [[1, 1], [-1, -1]])
        result = walksat_solve(formula, max_steps=0, seed=1)
        self.assertEqual(result.status, SolverStatus.TIMEOUT)
        self.assertEqual(result.steps, 0)

    def test_same_seed_same_run(self):
        formula = generate_random_kcnf(30, 120, 3, seed=11)
        first = walksat_solve(formula, max_steps=2000, seed=42)
        second = walksat_solve(formula, max_steps=2000, seed=42)
        self.assertEqual(first.status, second.status)
        self.assertEqual(first.solution, second.solution)
        self.assertEqual(first.steps, second.steps)

        third = walksat_solve(formula, max_steps=2000, rng=make_rng(42))
        self.assertEqual(first.steps, third.steps)

    def test_seed_is_exposed(self):
        formula = Formula(2, [[1, 2]])
        result = walksat_solve(formula, max_steps=5, seed=1234)
        self.assertEqual(result.statistics["seed"], 1234)

        result = walksat_solve(formula, max_steps=5)
        seed = result.statistics["seed"]
        self.assertIsInstance(seed, int)
        self.assertEqual(rng_seed(make_rng(seed)), seed)

    def test_drawn_seed_is_kept_on_solver(self):
        formula = Formula(2, [[1, 2]])
        solver = WalkSATSolver(max_steps=5)
        self.assertIsNone(solver.seed)
        result = solver.solve(formula)
        self.assertIsInstance(solver.last_seed, int)
        self.assertEqual(solver.last_seed, result.statistics["seed"])
        self.assertIsNone(solver.seed)

        # Replaying the drawn seed reproduces the run.
        replay = WalkSATSolver(max_steps=5, seed=solver.last_seed).solve(formula)
        self.assertEqual(replay.solution, result.solution)
        self.assertEqual(replay.steps, result.steps)

    def test_extreme_noise(self):
        formula = generate_random_kcnf(12, 36, 3, seed=5)
        for noise in (0.0, 1.0):
            result = walksat_solve(formula, max_steps=3000, noise_probability=noise, seed=2)
            if result.is_sat:
                self.assertTrue(formula.is_satisfied_by(result.assignment))

    def test_break_value(self):
        formula = Formula(2, [[1, 2], [1, -2], [-1, 2]])
        index = build_polarity_index(formula)
        assignment = np.array([True, False])
        true_counts = formula.true_literal_counts(assignment)
        np.testing.assert_array_equal(true_counts, [1, 2, 0])

        # Flipping 1 breaks clause 0; flipping 2 breaks nothing.
        self.assertEqual(WalkSATSolver._break_value(1, assignment, true_counts, index), 1)
        self.assertEqual(WalkSATSolver._break_value(2, assignment, true_counts, index), 0)

    def test_zero_break_variable_always_chosen(self):
        formula = Formula(2, [[1, 2], [1, -2], [-1, 2]])
        index = build_polarity_index(formula)
        assignment = np.array([True, False])
        true_counts = formula.true_literal_counts(assignment)

        # Even with pure noise a flip that breaks nothing wins.
        solver = WalkSATSolver(noise_probability=1.0)
        solver.stats = solver._new_stats(None)
        for seed in range(100):
            variable = solver._pick_variable(
                formula.clauses[2], assignment, true_counts, index, make_rng(seed)
            )
            self.assertEqual(variable, 2, f"seed={seed}")
        self.assertEqual(solver.stats["freebie_moves"], 100)
        self.assertEqual(solver.stats["noise_moves"], 0)

    def test_greedy_share_matches_noise_probability(self):
        # Clauses 0-3 are unsatisfiable together and every flip in them
        # breaks exactly one clause, so only the noise draw decides the move.
        formula = Formula(3, [[1, 2], [-1, -2], [1, -2], [-1, 2], [3, 3]])
        solver = WalkSATSolver(max_steps=20000, noise_probability=0.433, seed=1)
        result = solver.solve(formula)
        self.assertEqual(result.status, SolverStatus.TIMEOUT)

        stats = solver.get_statistics()
        self.assertLessEqual(stats["freebie_moves"], 1)
        moves = stats["greedy_moves"] + stats["noise_moves"]
        self.assertEqual(moves + stats["freebie_moves"], 20000)
        self.assertAlmostEqual(stats["greedy_moves"] / moves, 0.567, delta=0.02)

    def test_statistics(self):
        solver = WalkSATSolver(max_steps=100, seed=3)
        formula = Formula(1, [[1, 1], [-1, -1]])
        result = solver.solve(formula)
        stats = solver.get_statistics()
        self.assertEqual(stats["solver_name"], "walksat")
        self.assertEqual(stats["flips"], result.steps)
        self.assertEqual(
            stats["freebie_moves"] + stats["greedy_moves"] + stats["noise_moves"],
            stats["flips"],
        )
        self.assertEqual(stats["best_satisfied_clauses"], 1)

    def test_configure(self):
        solver = WalkSATSolver()
        self.assertEqual(solver.max_steps, 20000)
        self.assertAlmostEqual(solver.noise_probability, 0.433)

        solver.configure({"max_steps": 10, "noise_probability": 0.2})
        self.assertEqual(solver.max_steps, 10)
        self.assertEqual(solver.noise_probability, 0.2)

    def test_invalid_configuration(self):
        with self.assertRaises(ConfigurationError):
            WalkSATSolver(max_steps=-1)
        with self.assertRaises(ConfigurationError):
            WalkSATSolver(noise_probability=1.5)
        with self.assertRaises(ConfigurationError):
            WalkSATSolver().configure({"max_steps": 2.5})


if __name__ == "__main__":
    unittest.main()
