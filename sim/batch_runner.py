from __future__ import annotations

import argparse
import json
import logging
import random
import time
from dataclasses import dataclass
from pathlib import Path

from spider.Config import GameConfig, loadConfig
from spider.Game import Game

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RunResult:
    seed: int
    suits: int
    status: str
    moves: int
    completed_runs: int
    stock_left: int
    steps: int
    elapsed_ms: float

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "suits": self.suits,
            "status": self.status,
            "moves": self.moves,
            "completed_runs": self.completed_runs,
            "stock_left": self.stock_left,
            "steps": self.steps,
            "elapsed_ms": self.elapsed_ms,
        }


def play_seed(seed: int, config: GameConfig, max_steps: int = 2000) -> RunResult:
    """Play one seeded game with auto-play only."""
    t0 = time.perf_counter()
    game = Game(config)
    game.newGame(rng=random.Random(seed))
    steps = game.autoPlayUntilStuck(max_steps)
    state = game.state

    if game.won:
        status = "won"
    elif game.terminal:
        status = "no_moves"
    elif steps >= max_steps:
        status = "step_limit"
    else:
        status = "stalled"

    return RunResult(
        seed=seed,
        suits=config.suits,
        status=status,
        moves=state.moves,
        completed_runs=state.completedRuns,
        stock_left=len(state.stock),
        steps=steps,
        elapsed_ms=round((time.perf_counter() - t0) * 1000.0, 3),
    )


def run_batch(start_seed: int, count: int, config: GameConfig, max_steps: int = 2000) -> list[RunResult]:
    results = []
    for i in range(count):
        result = play_seed(start_seed + i, config, max_steps)
        logger.debug("seed=%d status=%s moves=%d", result.seed, result.status, result.moves)
        results.append(result)
    return results


def summarize(results: list[RunResult]) -> dict:
    counts: dict[str, int] = {}
    for result in results:
        counts[result.status] = counts.get(result.status, 0) + 1
    total_runs = sum(r.completed_runs for r in results)
    return {
        "games": len(results),
        "by_status": counts,
        "avg_moves": round(sum(r.moves for r in results) / len(results), 2) if results else 0.0,
        "avg_completed_runs": round(total_runs / len(results), 2) if results else 0.0,
    }


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play seeded Spider games with the auto-play heuristic.")
    parser.add_argument("--suits", type=int, choices=(3, 4), default=None, help="Suit count (overrides config).")
    parser.add_argument("--start-seed", type=int, default=0, help="Start seed (inclusive).")
    parser.add_argument("--count", type=int, default=10, help="How many seeds to play.")
    parser.add_argument("--max-steps", type=int, default=2000, help="Per-game auto-play step limit.")
    parser.add_argument("--config", type=str, default="", help="Optional ini file with a [game] section.")
    parser.add_argument("--no-repetition-check", action="store_true", help="Let auto-play revisit positions.")
    parser.add_argument("--jsonl", type=str, default="", help="Optional output jsonl path.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = loadConfig(args.config) if args.config else GameConfig()
    if args.suits is not None:
        config.suits = args.suits
    if args.no_repetition_check:
        config.autoPlayRepetitionCheck = False
    config.gameCode = None
    if config.suits not in (3, 4):
        raise SystemExit(f"a {config.suits}-suit deck is too small to deal, use 3 or 4 suits")

    out_path = Path(args.jsonl).expanduser() if args.jsonl else None
    if out_path is not None:
        out_path.parent.mkdir(parents=True, exist_ok=True)

    started = time.perf_counter()
    results = run_batch(args.start_seed, args.count, config, args.max_steps)
    for result in results:
        if out_path is not None:
            with out_path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(result.to_dict(), ensure_ascii=False) + "\n")
        print(
            f"seed={result.seed} status={result.status} moves={result.moves} "
            f"runs={result.completed_runs} stock={result.stock_left} ms={result.elapsed_ms}"
        )

    summary = summarize(results)
    total_ms = (time.perf_counter() - started) * 1000.0
    print(f"summary suits={config.suits} {json.dumps(summary, ensure_ascii=False)} total_ms={total_ms:.1f}")


if __name__ == "__main__":
    main()
