"""
Round-robin strategy benchmark from randomised opening positions.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from multiprocessing import Pool
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .config import BenchmarkSettings, EngineSettings, get_benchmark_settings, get_engine_settings, setup_logging
from .engine import apply_move, initial_state
from .moves import all_legal_moves
from .search import random_choice
from .strategies.registry import StrategyKind, get_strategy
from .types import DEFAULT_SIZE, Color, GameState

logger = logging.getLogger(__name__)

DEFAULT_STRATEGIES = ("mine", "dapetcu21-minimax", "dapetcu21-montecarlo")
BASELINE = StrategyKind.RANDOM.value


@dataclass(frozen=True)
class GameRecord:
    white: str
    black: str
    winner: str  # "white", "black" or "draw"
    moves: int
    opening_moves: int


@dataclass
class StrategyStats:
    wins: int = 0
    losses: int = 0
    draws: int = 0
    winrate: float = 0.0


def random_opening(rng: np.random.Generator, min_moves: int, max_moves: int,
                   size: int = DEFAULT_SIZE) -> Tuple[GameState, int]:
    """Play a random number of uniformly random plies from the initial position."""
    state = initial_state(size)
    count = int(rng.integers(min_moves, max_moves + 1))
    played = 0
    for _ in range(count):
        moves = all_legal_moves(state)
        if not moves:
            break
        state = apply_move(state, random_choice(rng, moves))
        played += 1
        if state.winner is not None:
            break
    return state, played


def _result_label(winner: Optional[Color]) -> str:
    if winner is Color.WHITE:
        return "white"
    if winner is Color.BLACK:
        return "black"
    return "draw"


def play_game(white: str, black: str, seed: int, min_opening: int, max_opening: int,
              max_moves: int, settings: Optional[EngineSettings] = None, size: int = DEFAULT_SIZE) -> GameRecord:
    """Play one game between two named strategies; each gets a fresh instance per move."""
    rng = np.random.default_rng(seed)
    state, opening = random_opening(rng, min_opening, max_opening, size)
    moves = 0
    while state.winner is None and moves < max_moves:
        name = white if state.turn is Color.WHITE else black
        strategy = get_strategy(name, settings=settings, rng=rng)
        move = strategy.choose_move(state)
        if move is None:
            break
        state = apply_move(state, move)
        moves += 1
    return GameRecord(white=white, black=black, winner=_result_label(state.winner),
                      moves=moves, opening_moves=opening)


def schedule_games(names: Sequence[str], settings: BenchmarkSettings, seed: Optional[int] = None,
                   engine: Optional[EngineSettings] = None) -> List[Tuple]:
    """Every ordered pairing (including self-play) gets ``total_games // k**2`` games, at least one."""
    seeds = np.random.SeedSequence(seed)
    size = engine.board_size if engine is not None else DEFAULT_SIZE
    per_pair = max(1, settings.total_games // (len(names) * len(names)))
    count = per_pair * len(names) * len(names)
    game_seeds = seeds.generate_state(count)
    tasks = []
    i = 0
    for white in names:
        for black in names:
            for _ in range(per_pair):
                tasks.append((white, black, int(game_seeds[i]), settings.min_opening_moves,
                              settings.max_opening_moves, settings.max_moves, engine, size))
                i += 1
    return tasks


def calculate_overall_stats(results: Sequence[GameRecord]) -> Dict[str, StrategyStats]:
    stats: Dict[str, StrategyStats] = {}
    for r in results:
        stats.setdefault(r.white, StrategyStats())
        stats.setdefault(r.black, StrategyStats())
    for r in results:
        if r.winner == "white":
            stats[r.white].wins += 1
            stats[r.black].losses += 1
        elif r.winner == "black":
            stats[r.black].wins += 1
            stats[r.white].losses += 1
        else:
            stats[r.white].draws += 1
            stats[r.black].draws += 1
    for s in stats.values():
        total = s.wins + s.losses + s.draws
        s.winrate = round(s.wins / total * 100, 1) if total else 0.0
    return stats


def winrate_table(results: Sequence[GameRecord]) -> Dict[str, Dict[str, float]]:
    """White's win percentage for every (white, black) pairing."""
    names = list(dict.fromkeys(n for r in results for n in (r.white, r.black)))
    table: Dict[str, Dict[str, float]] = {}
    for white in names:
        table[white] = {}
        for black in names:
            games = [r for r in results if r.white == white and r.black == black]
            wins = sum(1 for r in games if r.winner == "white")
            table[white][black] = round(wins / len(games) * 100, 1) if games else 0.0
    return table


def print_results(results: Sequence[GameRecord]) -> None:
    print("\nBENCHMARK RESULTS")
    print("=" * 80)
    table = winrate_table(results)
    names = list(table)
    print("\nWinrate Table (white win %):")
    print("-" * 80)
    header = "White \\ Black    " + "".join(n[:10].ljust(12) for n in names)
    print(header)
    print("-" * len(header))
    for white in names:
        row = [white[:15].ljust(17)]
        row.extend(f"{table[white][black]:.1f}%".ljust(12) for black in names)
        print("".join(row))

    print("\nOverall Statistics:")
    print("-" * 80)
    for name, s in calculate_overall_stats(results).items():
        print(f"{name:22s}: Winrate: {s.winrate}% | Wins: {s.wins}, Losses: {s.losses}, Draws: {s.draws}")


def save_results(results: Sequence[GameRecord], names: Sequence[str], settings: BenchmarkSettings) -> str:
    os.makedirs(settings.results_dir, exist_ok=True)
    now = datetime.now(timezone.utc)
    filename = os.path.join(settings.results_dir, f"benchmark-results-{now.strftime('%Y-%m-%dT%H-%M-%S')}.json")
    payload = {
        "timestamp": now.isoformat(),
        "config": settings.model_dump(),
        "strategies": list(names),
        "results": [asdict(r) for r in results],
        "overallStats": {k: asdict(v) for k, v in calculate_overall_stats(results).items()},
        "summary": {
            "totalGames": len(results),
            "averageMovesPerGame": round(float(np.mean([r.moves for r in results])), 1) if results else 0.0,
        },
    }
    with open(filename, "w") as f:
        json.dump(payload, f, indent=2)
    return filename


def run_benchmark(strategy_names: Sequence[str], settings: Optional[BenchmarkSettings] = None,
                  seed: Optional[int] = None, engine: Optional[EngineSettings] = None,
                  save: bool = False) -> List[GameRecord]:
    """Play the round robin of ``random`` plus ``strategy_names`` and report the results."""
    settings = settings or get_benchmark_settings()
    engine = engine or get_engine_settings()
    # Resolve every name up front so a typo fails before any game is played
    resolved = [StrategyKind.from_name(n).value for n in strategy_names]
    names = list(dict.fromkeys([BASELINE] + resolved))
    logger.info("Starting benchmark with strategies: %s", ", ".join(names))

    tasks = schedule_games(names, settings, seed=seed, engine=engine)
    logger.info("Playing %d games with random openings on %d worker(s)", len(tasks), settings.workers)
    start = time.time()
    if settings.workers > 1 and len(tasks) > 1:
        with Pool(settings.workers) as pool:
            results = pool.starmap(play_game, tasks)
    else:
        results = [play_game(*t) for t in tasks]
    logger.info("Benchmark finished in %.2fs", time.time() - start)

    if save:
        filename = save_results(results, names, settings)
        logger.info("Results saved to %s", filename)
    return results


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = get_benchmark_settings()
    ap = argparse.ArgumentParser(description="AI strategy benchmark for Breakthrough")
    ap.add_argument("-s", "--strategies", default=",".join(DEFAULT_STRATEGIES),
                    help="Comma-separated list of strategy names")
    ap.add_argument("-g", "--games", type=int, default=defaults.total_games, help="Total number of games")
    ap.add_argument("--min-opening", type=int, default=defaults.min_opening_moves, help="Minimum random opening moves")
    ap.add_argument("--max-opening", type=int, default=defaults.max_opening_moves, help="Maximum random opening moves")
    ap.add_argument("-m", "--moves", type=int, default=defaults.max_moves, help="Max moves per game")
    ap.add_argument("-w", "--workers", type=int, default=defaults.workers, help="Number of parallel workers")
    ap.add_argument("--seed", type=int, default=None, help="Seed for openings and strategies")
    ap.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    ap.add_argument("--save", action="store_true", help="Save results to JSON file")
    return ap.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    setup_logging()
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger("breakthrough").setLevel(logging.DEBUG)
    names = [s.strip() for s in args.strategies.split(",") if s.strip()]
    try:
        settings = BenchmarkSettings(**{
            **get_benchmark_settings().model_dump(),
            "total_games": args.games,
            "min_opening_moves": args.min_opening,
            "max_opening_moves": args.max_opening,
            "max_moves": args.moves,
            "workers": args.workers,
        })
        results = run_benchmark(names, settings=settings, seed=args.seed, save=args.save)
    except ValueError as exc:
        logger.error("Benchmark failed: %s", exc)
        return 1
    print_results(results)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
