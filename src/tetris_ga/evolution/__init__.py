"""Evolution of heuristic weights across generations of games."""

from .population import (
    Evolution,
    EvolutionConfig,
    GenerationResult,
    breed,
)

__all__ = [
    "Evolution",
    "EvolutionConfig",
    "GenerationResult",
    "breed",
]
