from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence

from tetris_ga.ai.agent import Agent
from tetris_ga.game.core import GameConfig

from .population import SCHEDULES, Evolution, EvolutionConfig, GenerationResult


logger = logging.getLogger(__name__)


def _print_progress(result: GenerationResult, total: Optional[int]) -> None:
    best = result.best_agent
    weights = " ".join(f"{w:+.3f}" for w in best.weights)
    of_total = f"/{total}" if total is not None else ""
    msg = (
        f"gen {result.generation}{of_total}  scores={result.scores}  "
        f"max={result.max_score}  best=[{weights}]"
    )
    print(msg, file=sys.stdout, flush=True)


def _load_population(path: str) -> List[Agent]:
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    rows = payload["agents"] if isinstance(payload, dict) else payload
    return [Agent.from_dict(row) for row in rows]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Evolve heuristic Tetris agents.")
    p.add_argument("--population", type=int, default=3)
    p.add_argument("--generations", type=int, default=None,
                   help="Number of generations to run (default: run until interrupted)")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--schedule", choices=SCHEDULES, default="round_robin")
    p.add_argument("--workers", type=int, default=None)
    p.add_argument("--mutation-rate", type=float, default=0.10)
    p.add_argument("--mutation-scale", type=float, default=0.1)
    p.add_argument("--max-ticks", type=int, default=None,
                   help="End each game after this many ticks")
    p.add_argument("--seed-weights", type=str, default=None,
                   help="JSON file with starting agents ({'agents': [{w_lines, w_height, w_holes, w_bumpiness}, ...]})")
    p.add_argument("--log-level", default="INFO")
    p.add_argument("--no-progress", action="store_true")
    p.add_argument("--render", action="store_true", help="Draw the running games with pygame")
    return p


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    config = EvolutionConfig(
        population_size=args.population,
        mutation_rate=args.mutation_rate,
        mutation_scale=args.mutation_scale,
        random_seed=args.seed,
        schedule=args.schedule,
        max_workers=args.workers,
        max_ticks_per_game=args.max_ticks,
    )
    population = _load_population(args.seed_weights) if args.seed_weights else None
    evolution = Evolution(config, GameConfig(), population=population)

    on_tick = None
    if args.render:
        if config.schedule != "round_robin":
            raise SystemExit("--render requires --schedule round_robin")
        from tetris_ga.visualization.renderer import LiveView

        view = LiveView(num_boards=config.population_size)
        on_tick = view.update

    def on_generation(result: GenerationResult) -> None:
        if not args.no_progress:
            _print_progress(result, args.generations)

    logger.info("Starting evolution with %d agents", config.population_size)
    try:
        evolution.run(args.generations, on_generation=on_generation, on_tick=on_tick)
    except KeyboardInterrupt:
        logger.info("Interrupted at generation %d; max score %d", evolution.generation, evolution.max_score.value)


if __name__ == "__main__":  # pragma: no cover
    main()
