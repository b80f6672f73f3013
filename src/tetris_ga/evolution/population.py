"""Generational loop: play one game per agent, then breed neighbours."""

from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence

from tetris_ga.ai.agent import Agent, crossover, random_agent
from tetris_ga.game.core import GameConfig, GameSession, MaxScoreTracker
from tetris_ga.game.rules import ScoringRules


logger = logging.getLogger(__name__)

SCHEDULES = ("round_robin", "threads")


@dataclass
class EvolutionConfig:
    population_size: int = 3
    mutation_rate: float = 0.10
    mutation_scale: float = 0.1
    random_seed: Optional[int] = None
    schedule: str = "round_robin"
    max_workers: Optional[int] = None
    # Ends a game early after this many ticks; None lets every game run to game over
    max_ticks_per_game: Optional[int] = None

    def validate(self) -> None:
        if self.population_size < 2:
            raise ValueError("population_size must be at least 2")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError("mutation_rate must be within [0, 1]")
        if self.mutation_scale < 0:
            raise ValueError("mutation_scale must be non-negative")
        if self.schedule not in SCHEDULES:
            raise ValueError(f"Unknown schedule {self.schedule!r}; expected one of {SCHEDULES}")
        if self.max_ticks_per_game is not None and self.max_ticks_per_game <= 0:
            raise ValueError("max_ticks_per_game must be positive")


@dataclass
class GenerationResult:
    generation: int
    agents: List[Agent]
    scores: List[int]
    max_score: int

    @property
    def best_agent(self) -> Agent:
        return max(self.agents, key=lambda a: a.fitness)


def breed(
    population: Sequence[Agent],
    rng: random.Random,
    mutation_rate: float = 0.1,
    mutation_scale: float = 0.1,
) -> List[Agent]:
    """Child i is the crossover of agents i and i+1 (wrapping). Fitness is not consulted."""
    n = len(population)
    return [
        crossover(population[i], population[(i + 1) % n], rng, mutation_rate, mutation_scale)
        for i in range(n)
    ]


TickCallback = Callable[[Sequence[GameSession]], None]


class Evolution:
    def __init__(
        self,
        config: Optional[EvolutionConfig] = None,
        game_config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        max_score: Optional[MaxScoreTracker] = None,
        population: Optional[Sequence[Agent]] = None,
    ) -> None:
        self.config = config or EvolutionConfig()
        if population is not None:
            self.config = replace(self.config, population_size=len(population))
        self.config.validate()
        self.game_config = game_config or GameConfig()
        self.rules = rules or ScoringRules()
        self.max_score = max_score if max_score is not None else MaxScoreTracker()
        self.rng = random.Random(self.config.random_seed)
        if population is not None:
            self.population = list(population)
        else:
            self.population = [random_agent(self.rng) for _ in range(self.config.population_size)]
        self.generation = 1

    def new_sessions(self) -> List[GameSession]:
        # Each session gets its own piece stream so threads never share an RNG
        return [
            GameSession(
                agent=agent,
                config=self.game_config,
                rules=self.rules,
                max_score=self.max_score,
                rng=random.Random(self.rng.getrandbits(32)),
            )
            for agent in self.population
        ]

    def _run_round_robin(self, sessions: Sequence[GameSession], on_tick: Optional[TickCallback]) -> None:
        cap = self.config.max_ticks_per_game
        ticks = 0
        while not all(s.finished for s in sessions):
            for session in sessions:
                if not session.finished:
                    session.tick()
            ticks += 1
            if cap is not None and ticks >= cap:
                for session in sessions:
                    session.end()
            if on_tick is not None:
                on_tick(sessions)

    def _play(self, session: GameSession) -> int:
        session.run_to_completion(self.config.max_ticks_per_game)
        session.end()
        return session.score

    def _run_threaded(self, sessions: Sequence[GameSession]) -> None:
        with ThreadPoolExecutor(max_workers=self.config.max_workers or len(sessions)) as pool:
            # list() re-raises any exception from a worker
            list(pool.map(self._play, sessions))

    def run_generation(self, on_tick: Optional[TickCallback] = None) -> GenerationResult:
        if on_tick is not None and self.config.schedule != "round_robin":
            raise ValueError("on_tick requires schedule='round_robin'")
        sessions = self.new_sessions()
        if self.config.schedule == "threads":
            self._run_threaded(sessions)
        else:
            self._run_round_robin(sessions, on_tick)

        finished = [s.agent for s in sessions]
        scores = [s.score for s in sessions]
        result = GenerationResult(
            generation=self.generation,
            agents=finished,
            scores=scores,
            max_score=self.max_score.value,
        )
        logger.info(
            "Generation %d finished. Scores: %s. Global Max: %d",
            self.generation, ", ".join(str(s) for s in scores), result.max_score,
        )

        self.population = breed(
            finished, self.rng, self.config.mutation_rate, self.config.mutation_scale
        )
        for i, agent in enumerate(self.population):
            logger.debug("Generation %d agent %d weights: %s", self.generation + 1, i, agent.to_dict())
        self.generation += 1
        return result

    def run(
        self,
        generations: Optional[int] = None,
        on_generation: Optional[Callable[[GenerationResult], None]] = None,
        on_tick: Optional[TickCallback] = None,
    ) -> List[GenerationResult]:
        """Run `generations` rounds, or forever when it is None."""
        results: List[GenerationResult] = []
        while generations is None or len(results) < generations:
            result = self.run_generation(on_tick)
            if generations is not None:
                results.append(result)
            if on_generation is not None:
                on_generation(result)
        return results
