from __future__ import annotations

import configparser
import logging
import random
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from spider.Core import Card, buildDeck, decodeCards

logger = logging.getLogger(__name__)

SECTION = "game"
SUIT_COUNT_ORDER = (1, 2, 3, 4)


@dataclass
class GameConfig:
    suits: int = 4
    seed: Optional[int] = None
    # Encoded fixed deck, dealt as-is instead of a shuffled one.
    gameCode: Optional[str] = None
    checkTerminalOnStart: bool = True
    autoPlayRepetitionCheck: bool = True

    def makeRng(self):
        if self.seed is None:
            return random
        return random.Random(self.seed)

    def initDeck(self, rng=None) -> list[Card]:
        if self.gameCode:
            try:
                return decodeCards(self.gameCode)
            except ValueError:
                logger.warning("ignoring malformed game code, dealing a shuffled deck")
        return buildDeck(self.suits, rng if rng is not None else self.makeRng())


DEFAULT_CONFIG = GameConfig()


def _as_bool(value, default: bool) -> bool:
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    return default


def _sanitize(raw: dict) -> GameConfig:
    config = GameConfig()

    try:
        suits = int(raw.get("suits", config.suits))
    except (TypeError, ValueError):
        suits = config.suits
    if suits not in SUIT_COUNT_ORDER:
        suits = config.suits
    config.suits = suits

    seed = str(raw.get("seed", "")).strip()
    if seed not in ("", "None"):
        try:
            config.seed = int(seed)
        except ValueError:
            logger.warning("ignoring non-integer seed %r", seed)

    code = str(raw.get("gameCode", "")).strip()
    if code not in ("", "None"):
        config.gameCode = code

    config.checkTerminalOnStart = _as_bool(raw.get("checkTerminalOnStart", ""), config.checkTerminalOnStart)
    config.autoPlayRepetitionCheck = _as_bool(raw.get("autoPlayRepetitionCheck", ""), config.autoPlayRepetitionCheck)
    return config


def loadConfig(path) -> GameConfig:
    """Read ``[game]`` from an ini file; missing or unreadable files give the defaults."""
    path = Path(path)
    if not path.exists():
        return GameConfig()
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str
    try:
        parser.read(path, encoding="utf-8")
    except (configparser.Error, UnicodeDecodeError):
        logger.warning("cannot parse %s, using default config", path)
        return GameConfig()
    if SECTION not in parser:
        return GameConfig()
    return _sanitize(dict(parser[SECTION]))


def saveConfig(config: GameConfig, path):
    data = {k: "" if v is None else str(v) for k, v in asdict(_sanitize(asdict(config))).items()}
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str
    parser[SECTION] = data
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        parser.write(f)
