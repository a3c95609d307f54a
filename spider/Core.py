from __future__ import annotations

import random
from dataclasses import dataclass, replace

SUITS = "♠♥♣♦"
RANKS = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")
NUM_PER_SUIT = len(RANKS)
KING = NUM_PER_SUIT - 1

# piles 0..3 get 6 cards, piles 4..9 get 5
PILE_SIZES = (6, 6, 6, 6, 5, 5, 5, 5, 5, 5)
INITIAL_DEALT = sum(PILE_SIZES)


class DealError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class Card:
    id: int
    suit: str
    rank: int
    faceUp: bool = False

    @property
    def label(self) -> str:
        return RANKS[self.rank]

    def flipped(self, faceUp=True) -> Card:
        if self.faceUp == faceUp:
            return self
        return replace(self, faceUp=faceUp)

    def __str__(self):
        return f"{self.suit}{self.label}" + ("" if self.faceUp else "H")

    def suitableAsSequenceFor(self, upper: Card) -> bool:
        return self.suit == upper.suit and self.rank == upper.rank + 1


Pile = tuple[Card, ...]
Tableau = tuple[Pile, ...]


@dataclass(frozen=True, slots=True)
class GameState:
    """Immutable snapshot of a game. Piles are bottom-first, the stock is drawn from its end."""

    tableau: Tableau
    stock: Pile = ()
    completedRuns: int = 0
    moves: int = 0


def lastOf(lst):
    return lst[len(lst) - 1]


# --- deck factory / dealer ---

def buildDeck(suitCount: int, rng=None) -> list[Card]:
    """
    Two copies of the first ``suitCount`` suits, face down, Fisher-Yates shuffled.

    :param rng: anything with ``randint(a, b)``; the ``random`` module when omitted.
    """
    if suitCount not in (1, 2, 3, 4):
        raise ValueError(f"unsupported suit count: {suitCount}")
    deck = []
    for _ in range(2):
        for suit in SUITS[:suitCount]:
            for rank in range(NUM_PER_SUIT):
                deck.append(Card(len(deck), suit, rank))
    rng = rng if rng is not None else random
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randint(0, i)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def deal(deck) -> GameState:
    if len(deck) < INITIAL_DEALT:
        raise DealError(f"deck has {len(deck)} cards, need at least {INITIAL_DEALT}")
    tableau = []
    idx = 0
    for size in PILE_SIZES:
        pile = [card.flipped(False) for card in deck[idx:idx + size]]
        pile[-1] = pile[-1].flipped()
        tableau.append(tuple(pile))
        idx += size
    stock = tuple(card.flipped(False) for card in deck[idx:])
    return GameState(tableau=tuple(tableau), stock=stock)


# --- run validator ---

def isMovableRun(cards) -> bool:
    if len(cards) == 0:
        return False
    for i in range(1, len(cards)):
        base = cards[i - 1]
        upper = cards[i]
        if not (base.faceUp and upper.faceUp):
            return False
        if not base.suitableAsSequenceFor(upper):
            return False
    return True


def canPlace(leadCard: Card, destinationPile) -> bool:
    if len(destinationPile) == 0:
        return True
    return lastOf(destinationPile).suitableAsSequenceFor(leadCard)


def isCompletedRun(pile) -> bool:
    """True when the top 13 cards are a face-up same-suit King..Ace run."""
    if len(pile) < NUM_PER_SUIT:
        return False
    top = pile[len(pile) - NUM_PER_SUIT:]
    if top[0].rank != KING:
        return False
    return isMovableRun(top)


# --- transition engine ---

def _revealTop(pile: Pile) -> Pile:
    if len(pile) > 0 and not lastOf(pile).faceUp:
        return pile[:-1] + (lastOf(pile).flipped(),)
    return pile


def _sweep(tableau: Tableau) -> tuple[Tableau, int]:
    cleared = 0
    out = []
    for pile in tableau:
        if isCompletedRun(pile):
            pile = _revealTop(pile[:len(pile) - NUM_PER_SUIT])
            cleared += 1
        out.append(pile)
    return tuple(out), cleared


def isValidPosition(state: GameState, pileIdx, cardIdx=None) -> bool:
    if not isinstance(pileIdx, int) or pileIdx < 0 or pileIdx >= len(state.tableau):
        return False
    if cardIdx is None:
        return True
    if not isinstance(cardIdx, int):
        return False
    return 0 <= cardIdx < len(state.tableau[pileIdx])


def canMove(state: GameState, fromPile, fromIndex, toPile) -> bool:
    if not isValidPosition(state, fromPile, fromIndex) or not isValidPosition(state, toPile):
        return False
    if fromPile == toPile:
        return False
    group = state.tableau[fromPile][fromIndex:]
    if not group[0].faceUp or not isMovableRun(group):
        return False
    return canPlace(group[0], state.tableau[toPile])


def applyTableauMove(state: GameState, fromPile, fromIndex, toPile) -> GameState:
    """Move the run starting at ``fromIndex``; returns ``state`` itself when the move is illegal."""
    if not canMove(state, fromPile, fromIndex, toPile):
        return state
    src = state.tableau[fromPile]
    group = src[fromIndex:]
    tableau = list(state.tableau)
    tableau[fromPile] = _revealTop(src[:fromIndex])
    tableau[toPile] = state.tableau[toPile] + group
    tableau, cleared = _sweep(tuple(tableau))
    return replace(
        state,
        tableau=tableau,
        completedRuns=state.completedRuns + cleared,
        moves=state.moves + 1,
    )


def canDealStock(state: GameState) -> bool:
    if len(state.stock) == 0:
        return False
    return all(len(pile) > 0 for pile in state.tableau)


def dealStock(state: GameState) -> GameState:
    if not canDealStock(state):
        return state
    stock = list(state.stock)
    tableau = list(state.tableau)
    for dest in range(len(tableau)):
        if not stock:
            break
        tableau[dest] = tableau[dest] + (stock.pop().flipped(),)
    tableau, cleared = _sweep(tuple(tableau))
    return GameState(
        tableau=tableau,
        stock=tuple(stock),
        completedRuns=state.completedRuns + cleared,
        moves=state.moves + 1,
    )


def clearCompletedRuns(state: GameState) -> GameState:
    tableau, cleared = _sweep(state.tableau)
    if cleared == 0:
        return state
    return replace(
        state,
        tableau=tableau,
        completedRuns=state.completedRuns + cleared,
        moves=state.moves + 1,
    )


# --- terminal detector ---

def movableStarts(pile) -> tuple[int, ...]:
    """Indices that start a face-up movable run reaching the top of the pile, ascending."""
    n = len(pile)
    if n == 0 or not lastOf(pile).faceUp:
        return ()
    valid = [n - 1]
    for idx in range(n - 2, -1, -1):
        lower = pile[idx]
        if not lower.faceUp or not lower.suitableAsSequenceFor(pile[idx + 1]):
            break
        valid.append(idx)
    valid.reverse()
    return tuple(valid)


def existValidDestination(state: GameState, card: Card, exclude: int) -> bool:
    for idx, pile in enumerate(state.tableau):
        if idx != exclude and canPlace(card, pile):
            return True
    return False


def hasAnyMove(state: GameState) -> bool:
    for pile in state.tableau:
        if isCompletedRun(pile):
            return True
    for idx, pile in enumerate(state.tableau):
        for start in movableStarts(pile):
            if existValidDestination(state, pile[start], idx):
                return True
    return canDealStock(state)


def isWon(state: GameState) -> bool:
    if state.stock:
        return False
    return all(len(pile) == 0 for pile in state.tableau)


# --- codec ---

def encodeCards(cards) -> str:
    if len(cards) == 0:
        return "empty"

    def encodeCard(card: Card):
        return f"{card.id} {card.suit}{card.label} {1 if card.faceUp else 0}"

    return ",".join(map(encodeCard, cards))


def decodeCards(code: str) -> list[Card]:
    code = code.strip()
    if code.startswith("empty"):
        return []

    def decodeCard(s: str):
        data = s.split()
        if len(data) != 3 or data[2] not in ("0", "1"):
            raise ValueError(f"malformed card code: {s!r}")
        suit, label = data[1][0], data[1][1:]
        if suit not in SUITS or label not in RANKS:
            raise ValueError(f"unknown card: {data[1]!r}")
        return Card(int(data[0]), suit, RANKS.index(label), data[2] == "1")

    return [decodeCard(s) for s in code.split(",")]
