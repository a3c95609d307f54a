from __future__ import annotations

from spider.Core import GameState

History = tuple[GameState, ...]

EMPTY_HISTORY: History = ()


def push(history: History, state: GameState) -> History:
    return history + (state,)


def undo(state: GameState, history: History) -> tuple[GameState, History]:
    """
    Restore the most recent snapshot.
    Counters come back verbatim from the snapshot, so nothing is recomputed here.
    :return: ``(state, history)`` unchanged when there is nothing to undo
    """
    if len(history) == 0:
        return state, history
    return history[-1], history[:-1]
