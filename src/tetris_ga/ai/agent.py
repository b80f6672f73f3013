from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Tuple


WEIGHT_NAMES = ("w_lines", "w_height", "w_holes", "w_bumpiness")

Weights = Tuple[float, float, float, float]


@dataclass
class Agent:
    """Heuristic weight vector plus the score of its last finished game.

    Weights are fixed once the agent exists; only `fitness` is written, when
    the agent's session ends.
    """

    weights: Weights
    fitness: float = 0.0

    def __post_init__(self) -> None:
        if len(self.weights) != len(WEIGHT_NAMES):
            raise ValueError(f"Agent needs {len(WEIGHT_NAMES)} weights, got {len(self.weights)}")
        self.weights = tuple(float(w) for w in self.weights)  # type: ignore[assignment]

    @property
    def w_lines(self) -> float:
        return self.weights[0]

    @property
    def w_height(self) -> float:
        return self.weights[1]

    @property
    def w_holes(self) -> float:
        return self.weights[2]

    @property
    def w_bumpiness(self) -> float:
        return self.weights[3]

    def to_dict(self) -> Dict[str, float]:
        d = dict(zip(WEIGHT_NAMES, self.weights))
        d["fitness"] = float(self.fitness)
        return d

    @staticmethod
    def from_dict(d: dict) -> "Agent":
        return Agent(
            weights=tuple(float(d[name]) for name in WEIGHT_NAMES),  # type: ignore[arg-type]
            fitness=float(d.get("fitness", 0.0)),
        )


def random_weight(rng: random.Random) -> float:
    return rng.uniform(-1.0, 1.0)


def random_agent(rng: random.Random) -> Agent:
    return Agent(weights=tuple(random_weight(rng) for _ in WEIGHT_NAMES))  # type: ignore[arg-type]


def crossover(
    parent1: Agent,
    parent2: Agent,
    rng: random.Random,
    mutation_rate: float = 0.1,
    mutation_scale: float = 0.1,
) -> Agent:
    """Average the parents' weights; each component may get a small random nudge."""
    child = []
    for w1, w2 in zip(parent1.weights, parent2.weights):
        w = (w1 + w2) / 2.0
        if rng.random() < mutation_rate:
            w += random_weight(rng) * mutation_scale
        child.append(w)
    return Agent(weights=tuple(child))  # type: ignore[arg-type]
