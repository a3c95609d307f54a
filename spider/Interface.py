from spider.Core import GameState


class Interface:
    """Presentation-side observer of a ``Game``. Reads state, never mutates it."""

    def __init__(self):
        self.game = None

    def onStart(self, state: GameState):
        self.notifyRedraw()

    def onStateChange(self, state: GameState):
        """
        Invoked after a move, a stock deal or an auto-play step is committed.
        :param state: the new current state
        """
        self.notifyRedraw()

    def onUndo(self, state: GameState):
        """
        Invoked after an undo.
        :param state: the restored state
        """
        self.notifyRedraw()

    def notifyRedraw(self):
        pass

    def onNoMoves(self, state: GameState):
        pass

    def onWin(self, state: GameState):
        pass
