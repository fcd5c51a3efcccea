from __future__ import annotations

import unittest

from tests import test_support

from orchard.common import INITIAL_STATE, State
from orchard.solver import RecursiveEvaluator, solve_recursive, solve_recursive_with_stats
from orchard.strategies import FunctionStrategy, strategy_choices


class TestRecursiveSolver(unittest.TestCase):
    def test_initial_state_in_unit_interval(self) -> None:
        for name in strategy_choices():
            with self.subTest(strategy=name):
                p = solve_recursive(name)
                self.assertGreater(p, 0.0)
                self.assertLess(p, 1.0)

    def test_terminal_states(self) -> None:
        for name in strategy_choices():
            with self.subTest(strategy=name):
                self.assertEqual(solve_recursive(name, test_support.state("0,0,0,0,3")), 1.0)
                self.assertEqual(solve_recursive(name, test_support.state("2,1,0,0,0")), 0.0)
                self.assertEqual(solve_recursive(name, State(0, 0, 0, 0, 0)), 1.0)

    def test_small_states_by_hand(self) -> None:
        # raven -> lose, fruit -> win, basket -> win
        self.assertAlmostEqual(solve_recursive("greedy", test_support.state("1,0,0,0,1")), 2 / 3)
        self.assertAlmostEqual(solve_recursive("greedy", test_support.state("2,0,0,0,1")), 4 / 9)
        self.assertAlmostEqual(solve_recursive("greedy", test_support.state("1,1,0,0,1")), 0.5)
        self.assertAlmostEqual(solve_recursive("greedy", test_support.state("1,0,0,0,2")), 8 / 9)

    def test_strategies_differ_where_choice_matters(self) -> None:
        state = test_support.state("2,1,0,0,1")
        self.assertAlmostEqual(solve_recursive("greedy", state), 25 / 72)
        self.assertAlmostEqual(solve_recursive("variety", state), 26 / 72)

    def test_unsorted_state_is_rejected(self) -> None:
        with self.assertRaisesRegex(KeyError, "state not in table"):
            solve_recursive("variety", State(3, 4, 4, 4, 5))
        with self.assertRaisesRegex(KeyError, "state not in table"):
            solve_recursive("greedy", State(5, 0, 0, 0, 1))
        with self.assertRaisesRegex(KeyError, "state not in table"):
            solve_recursive_with_stats("greedy", State(1, 0, 0, 0, 6))

    def test_reproducible(self) -> None:
        for name in strategy_choices():
            with self.subTest(strategy=name):
                self.assertEqual(solve_recursive(name), solve_recursive(name))

    def test_cache_is_scoped_per_call(self) -> None:
        greedy_first = solve_recursive("greedy")
        variety = solve_recursive("variety")
        greedy_again = solve_recursive("greedy")
        self.assertEqual(greedy_first, greedy_again)
        self.assertNotEqual(greedy_first, variety)

        a = RecursiveEvaluator("greedy")
        b = RecursiveEvaluator("greedy")
        a.win_chance(INITIAL_STATE)
        self.assertGreater(len(a.cache), 0)
        self.assertEqual(len(b.cache), 0)

    def test_stats(self) -> None:
        p, stats = solve_recursive_with_stats("variety")
        self.assertEqual(p, solve_recursive("variety"))
        self.assertEqual(stats.method, "recursive")
        self.assertEqual(stats.strategy, "variety")
        self.assertGreater(stats.states_computed, 0)
        self.assertGreater(stats.cache_hits, 0)
        self.assertGreaterEqual(stats.seconds, 0.0)
        self.assertIn("recursive/variety", stats.summary())

    def test_accepts_plain_callable(self) -> None:
        p = solve_recursive(lambda state: 0)
        self.assertEqual(p, solve_recursive("variety"))
        p = solve_recursive(FunctionStrategy(lambda state: 0, name="fullest"))
        self.assertEqual(p, solve_recursive("variety"))


if __name__ == "__main__":
    unittest.main()
