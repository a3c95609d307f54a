from __future__ import annotations

import logging
from collections import Counter
from dataclasses import replace
from typing import Optional

from spider import History as H
from spider.AutoPlay import autoPlayStep, positionKey
from spider.Config import DEFAULT_CONFIG, GameConfig
from spider.Core import GameState, applyTableauMove, buildDeck, deal, dealStock, hasAnyMove, isWon

logger = logging.getLogger(__name__)


class GameNotStartedError(RuntimeError):
    pass


def newGame(suitCount: int = 4, rng=None) -> GameState:
    """Shuffle and deal. Only 3 or 4 suits hold the 54 cards a deal needs; 1 or 2 raise ``DealError``."""
    return deal(buildDeck(suitCount, rng))


def requestTableauMove(state: GameState, fromPile, fromCardIndex, toPile) -> GameState:
    return applyTableauMove(state, fromPile, fromCardIndex, toPile)


def requestStockDeal(state: GameState) -> GameState:
    return dealStock(state)


def requestAutoPlayStep(state: GameState, history: H.History = H.EMPTY_HISTORY) -> GameState:
    """
    One auto-play action. With an empty ``history`` this is the plain greedy step;
    otherwise positions in ``history`` and ``state`` itself are avoided, and so are
    whole-pile moves onto an empty pile.
    """
    if not history:
        return autoPlayStep(state)
    seen = {positionKey(s) for s in history}
    seen.add(positionKey(state))
    return autoPlayStep(state, seen)


def requestUndo(state: GameState, history: H.History) -> tuple[GameState, H.History]:
    return H.undo(state, history)


def isTerminal(state: GameState) -> bool:
    return not hasAnyMove(state)


class Game:
    """
    Holds the current state and its undo history for one player.

    ask*** : requests from the presentation layer, return True when the state changed
    """

    def __init__(self, config: GameConfig = DEFAULT_CONFIG):
        self.config = config
        self.interface = None
        self._state: Optional[GameState] = None
        self._history: H.History = H.EMPTY_HISTORY
        self._terminal = False
        # positions of the history plus the current state, for auto-play repetition checks
        self._positions: Counter = Counter()

    def registerInterface(self, interface):
        self.interface = interface
        interface.game = self

    @property
    def state(self) -> GameState:
        self._requireStarted()
        return self._state

    @property
    def history(self) -> H.History:
        return self._history

    @property
    def terminal(self) -> bool:
        return self._terminal

    @property
    def won(self) -> bool:
        return self._state is not None and isWon(self._state)

    def _requireStarted(self):
        if self._state is None:
            raise GameNotStartedError("no game in progress, call newGame() first")

    def newGame(self, suitCount: Optional[int] = None, rng=None) -> GameState:
        """Start a new deal. Only 3 or 4 suits can be dealt; 1 or 2 end in ``DealError``."""
        config = self.config
        if suitCount is not None and suitCount != config.suits:
            config = replace(config, suits=suitCount, gameCode=None)
        state = deal(config.initDeck(rng))
        logger.info("new game: %d suits, %d cards in stock", config.suits, len(state.stock))
        return self._start(state, config.checkTerminalOnStart)

    def startFrom(self, state: GameState) -> GameState:
        """Continue from an arbitrary position with an empty history."""
        return self._start(state, True)

    def _start(self, state: GameState, checkTerminal: bool) -> GameState:
        self._state = state
        self._history = H.EMPTY_HISTORY
        self._terminal = False
        self._positions = Counter([positionKey(state)])
        if self.interface is not None:
            self.interface.onStart(state)
        if checkTerminal:
            self._checkTerminal()
        return state

    def _commit(self, newState: GameState) -> bool:
        if newState is self._state:
            return False
        self._history = H.push(self._history, self._state)
        self._state = newState
        self._positions[positionKey(newState)] += 1
        if self.interface is not None:
            self.interface.onStateChange(newState)
        self._checkTerminal()
        return True

    def _checkTerminal(self):
        if hasAnyMove(self._state):
            return
        self._terminal = True
        if isWon(self._state):
            logger.info("game won after %d moves", self._state.moves)
            if self.interface is not None:
                self.interface.onWin(self._state)
        else:
            logger.info("no moves left after %d moves", self._state.moves)
            if self.interface is not None:
                self.interface.onNoMoves(self._state)

    def askMove(self, fromPile, fromIndex, toPile) -> bool:
        self._requireStarted()
        if self._commit(requestTableauMove(self._state, fromPile, fromIndex, toPile)):
            return True
        logger.debug("rejected move pile %r[%r] -> pile %r", fromPile, fromIndex, toPile)
        return False

    def askDeal(self) -> bool:
        self._requireStarted()
        if self._commit(requestStockDeal(self._state)):
            return True
        logger.debug("rejected stock deal (stock=%d)", len(self._state.stock))
        return False

    def askAutoPlay(self) -> bool:
        self._requireStarted()
        if self.config.autoPlayRepetitionCheck:
            newState = autoPlayStep(self._state, self._positions)
        else:
            newState = autoPlayStep(self._state)
        if self._commit(newState):
            return True
        # nothing applicable; only a real dead end counts as terminal
        if not self._terminal:
            self._checkTerminal()
        return False

    def askUndo(self) -> bool:
        self._requireStarted()
        state, history = requestUndo(self._state, self._history)
        if state is self._state:
            return False
        key = positionKey(self._state)
        self._positions[key] -= 1
        if self._positions[key] <= 0:
            del self._positions[key]
        self._state = state
        self._history = history
        self._terminal = False
        if self.interface is not None:
            self.interface.onUndo(state)
        return True

    def autoPlayUntilStuck(self, maxSteps: int = 1000) -> int:
        """
        Run auto-play until it stops changing the state or ``maxSteps`` is reached.
        :return: number of steps applied
        """
        steps = 0
        while steps < maxSteps and not self._terminal:
            if not self.askAutoPlay():
                break
            steps += 1
        return steps
