import itertools
import unittest

from spider.AutoPlay import autoPlayStep, findTableauMove, positionKey
from spider.Core import PILE_SIZES, Card, GameState, buildDeck, deal, hasAnyMove

_ids = itertools.count(2000)


def visible(suit, rank):
    return Card(next(_ids), suit, rank, True)


def hidden(suit, rank):
    return Card(next(_ids), suit, rank, False)


def stateOf(*piles, stock=()):
    return GameState(tableau=tuple(tuple(p) for p in piles), stock=tuple(stock))


class NoSwapRandom:
    def randint(self, a, b):
        return b


class AutoPlayTestCase(unittest.TestCase):
    def test_first_steps_from_unshuffled_deck(self):
        start = deal(buildDeck(4, NoSwapRandom()))
        tops = [(p[-1].suit, p[-1].label) for p in start.tableau]
        self.assertEqual(
            [("♠", "6"), ("♠", "Q"), ("♥", "5"), ("♥", "J"), ("♣", "3"),
             ("♣", "8"), ("♣", "K"), ("♦", "5"), ("♦", "10"), ("♠", "2")],
            tops,
        )

        # no tableau move exists, so the first step deals the stock
        first = autoPlayStep(start)
        self.assertEqual(1, first.moves)
        self.assertEqual(0, first.completedRuns)
        self.assertEqual(list(range(54, 94)), [c.id for c in first.stock])
        for i, pile in enumerate(first.tableau):
            self.assertEqual(PILE_SIZES[i] + 1, len(pile))
            self.assertEqual(start.tableau[i], pile[:-1])
            self.assertEqual(103 - i, pile[-1].id)
            self.assertTrue(pile[-1].faceUp)
        self.assertEqual(("♦", "K"), (first.tableau[0][-1].suit, first.tableau[0][-1].label))

        # the lowest pile holding a placeable card moves first: Q♦ onto K♦
        second = autoPlayStep(first)
        self.assertEqual(2, second.moves)
        self.assertEqual([103, 102], [c.id for c in second.tableau[0][-2:]])
        self.assertEqual(first.tableau[1][:-1], second.tableau[1])
        self.assertEqual(first.stock, second.stock)

    def test_clearing_a_completed_run_comes_first(self):
        full = tuple(visible("♥", r) for r in range(12, -1, -1))
        state = stateOf((hidden("♣", 2),) + full, (visible("♠", 3),), (visible("♠", 4),))
        after = autoPlayStep(state)
        self.assertEqual(1, after.completedRuns)
        self.assertEqual(1, after.moves)
        self.assertEqual(1, len(after.tableau[0]))
        self.assertTrue(after.tableau[0][0].faceUp)
        # the 4♠ -> 5♠ move has not been made yet
        self.assertEqual(1, len(after.tableau[1]))

    def test_tableau_move_scan_order(self):
        state = stateOf(
            (visible("♦", 9),),
            (hidden("♣", 0), visible("♠", 7), visible("♠", 6)),
            (visible("♠", 8),),
            (visible("♠", 7),),
        )
        # pile 1 from index 1 (8♠ 7♠) is the first placeable group, 9♠ on pile 2 takes it
        self.assertEqual((1, 1, 2), findTableauMove(state))
        after = autoPlayStep(state)
        self.assertEqual(1, len(after.tableau[1]))
        self.assertTrue(after.tableau[1][0].faceUp)
        self.assertEqual([8, 7, 6], [c.rank for c in after.tableau[2]])

    def test_deal_when_no_tableau_move(self):
        piles = [(visible("♠", 12),) for _ in range(10)]
        state = stateOf(*piles, stock=[hidden("♥", 0)])
        after = autoPlayStep(state)
        self.assertEqual(0, len(after.stock))
        self.assertEqual(2, len(after.tableau[0]))

    def test_nothing_to_do(self):
        state = stateOf(*[(visible("♠", 12),) for _ in range(10)])
        self.assertIs(state, autoPlayStep(state))
        self.assertFalse(hasAnyMove(state))

    def test_greedy_ping_pong_and_repetition_check(self):
        s0 = stateOf((visible("♠", 7),), (visible("♠", 7),), (hidden("♥", 12), visible("♠", 6)))
        s1 = autoPlayStep(s0)
        s2 = autoPlayStep(s1)
        s3 = autoPlayStep(s2)
        self.assertEqual(2, len(s1.tableau[0]))
        self.assertEqual(2, len(s2.tableau[1]))
        # without memory the heuristic bounces 7♠ between the two 8♠
        self.assertEqual(positionKey(s1), positionKey(s3))

        seen = [positionKey(s) for s in (s0, s1, s2)]
        self.assertIsNone(findTableauMove(s2, seen))
        self.assertIs(s2, autoPlayStep(s2, seen))
        self.assertTrue(hasAnyMove(s2))

    def test_whole_pile_to_empty_pile_skipped_with_memory(self):
        state = stateOf((visible("♠", 3),), (), (visible("♥", 9),))
        self.assertEqual((0, 0, 1), findTableauMove(state))
        self.assertIsNone(findTableauMove(state, [positionKey(state)]))

    def test_position_key_ignores_move_counter(self):
        state = stateOf((visible("♠", 3),))
        counted = GameState(tableau=state.tableau, stock=state.stock, moves=9)
        self.assertEqual(positionKey(state), positionKey(counted))


if __name__ == "__main__":
    unittest.main()
