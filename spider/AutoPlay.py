from __future__ import annotations

import logging
from typing import Collection, Optional

from spider.Core import (
    GameState,
    applyTableauMove,
    canDealStock,
    canPlace,
    clearCompletedRuns,
    dealStock,
    movableStarts,
)

logger = logging.getLogger(__name__)

PositionKey = tuple


def positionKey(state: GameState) -> PositionKey:
    """Identity of a position for repetition checks; the move counter is ignored."""
    tableau = tuple(tuple((card.id, card.faceUp) for card in pile) for pile in state.tableau)
    stock = tuple(card.id for card in state.stock)
    return tableau, stock, state.completedRuns


def findTableauMove(state: GameState, seen: Optional[Collection[PositionKey]] = None) -> Optional[tuple[int, int, int]]:
    """
    First legal (fromPile, fromIndex, toPile) in scan order: source piles ascending,
    start positions ascending, destination piles ascending.

    With ``seen`` given, moves leading back to a known position are skipped, as are
    moves of a whole pile onto an empty pile.
    """
    for src, pile in enumerate(state.tableau):
        for start in movableStarts(pile):
            lead = pile[start]
            for dest, destPile in enumerate(state.tableau):
                if dest == src or not canPlace(lead, destPile):
                    continue
                if seen is None:
                    return src, start, dest
                if start == 0 and len(destPile) == 0:
                    continue
                if positionKey(applyTableauMove(state, src, start, dest)) in seen:
                    continue
                return src, start, dest
    return None


def autoPlayStep(state: GameState, seen: Optional[Collection[PositionKey]] = None) -> GameState:
    """
    Apply one greedy action: clear a completed run, else the first tableau move,
    else a stock deal. Returns ``state`` itself when nothing applies.
    """
    cleared = clearCompletedRuns(state)
    if cleared is not state:
        logger.debug("auto-play cleared %d run(s)", cleared.completedRuns - state.completedRuns)
        return cleared

    move = findTableauMove(state, seen)
    if move is not None:
        logger.debug("auto-play move pile %d[%d] -> pile %d", *move)
        return applyTableauMove(state, *move)

    if canDealStock(state):
        logger.debug("auto-play dealing from stock (%d cards)", len(state.stock))
        return dealStock(state)

    logger.debug("auto-play found nothing to do")
    return state
