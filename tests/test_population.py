import random

import pytest

from tetris_ga.ai.agent import Agent
from tetris_ga.evolution import Evolution, EvolutionConfig, GenerationResult, breed
from tetris_ga.game.core import MaxScoreTracker


def _reckless_population(n: int):
    return [Agent(weights=(0.0, -1.0, 0.0, -1.0 + 0.1 * i)) for i in range(n)]


class TestBreed:
    def test_cyclic_neighbour_pairs(self):
        parents = [Agent(weights=(float(i), 0.0, 0.0, 0.0)) for i in range(4)]
        children = breed(parents, random.Random(0), mutation_rate=0.0)
        assert [c.w_lines for c in children] == pytest.approx([0.5, 1.5, 2.5, 1.5])

    def test_fitness_is_ignored(self):
        parents = [Agent(weights=(float(i), 0.0, 0.0, 0.0)) for i in range(3)]
        ranked = [Agent(weights=p.weights, fitness=f) for p, f in zip(parents, [0, 5000, 10])]
        a = breed(parents, random.Random(1), mutation_rate=0.0)
        b = breed(ranked, random.Random(1), mutation_rate=0.0)
        assert [c.weights for c in a] == [c.weights for c in b]

    def test_size_preserved_and_fitness_reset(self):
        parents = [Agent(weights=(0.1, 0.2, 0.3, 0.4), fitness=100) for _ in range(5)]
        children = breed(parents, random.Random(2))
        assert len(children) == 5
        assert all(c.fitness == 0 for c in children)
        assert all(c is not p for c, p in zip(children, parents))


class TestConfig:
    def test_defaults(self):
        config = EvolutionConfig()
        config.validate()
        assert config.population_size == 3
        assert config.mutation_rate == 0.10

    @pytest.mark.parametrize("kwargs", [
        {"population_size": 1},
        {"mutation_rate": 1.5},
        {"mutation_scale": -0.1},
        {"schedule": "bogus"},
        {"max_ticks_per_game": 0},
    ])
    def test_rejects_bad_values(self, kwargs):
        with pytest.raises(ValueError):
            EvolutionConfig(**kwargs).validate()

    def test_random_population(self):
        evolution = Evolution(EvolutionConfig(population_size=6, random_seed=3))
        assert len(evolution.population) == 6
        assert all(-1.0 <= w <= 1.0 for a in evolution.population for w in a.weights)

    def test_given_population_sets_size(self):
        evolution = Evolution(population=_reckless_population(4))
        assert evolution.config.population_size == 4

    def test_given_population_leaves_caller_config_alone(self):
        config = EvolutionConfig(population_size=3)
        evolution = Evolution(config, population=_reckless_population(5))
        assert evolution.config.population_size == 5
        assert config.population_size == 3


class TestGeneration:
    @pytest.mark.parametrize("schedule", ["round_robin", "threads"])
    def test_run_generation(self, schedule):
        config = EvolutionConfig(random_seed=5, schedule=schedule, max_ticks_per_game=5_000)
        tracker = MaxScoreTracker()
        population = _reckless_population(3)
        evolution = Evolution(config, max_score=tracker, population=population)

        result = evolution.run_generation()

        assert isinstance(result, GenerationResult)
        assert result.generation == 1
        assert len(result.scores) == 3
        assert [a.fitness for a in result.agents] == result.scores
        assert result.max_score == max(result.scores)
        assert tracker.value == result.max_score
        assert evolution.generation == 2
        assert len(evolution.population) == 3
        assert all(a.fitness == 0 for a in evolution.population)
        assert not any(a is b for a in evolution.population for b in population)

    def test_tick_cap_ends_every_game(self):
        config = EvolutionConfig(population_size=2, random_seed=1, max_ticks_per_game=1)
        evolution = Evolution(config)
        ticks = []
        result = evolution.run_generation(on_tick=lambda sessions: ticks.append(len(sessions)))
        assert ticks == [2]
        assert result.scores == [0, 0]

    def test_tick_callback_needs_round_robin(self):
        config = EvolutionConfig(population_size=2, random_seed=1, max_ticks_per_game=3, schedule="threads")
        evolution = Evolution(config)
        with pytest.raises(ValueError, match="round_robin"):
            evolution.run_generation(on_tick=lambda sessions: None)
        assert evolution.generation == 1

    def test_run_fixed_number_of_generations(self):
        config = EvolutionConfig(random_seed=2, max_ticks_per_game=200)
        evolution = Evolution(config, population=_reckless_population(3))
        seen = []
        results = evolution.run(2, on_generation=seen.append)
        assert [r.generation for r in results] == [1, 2]
        assert seen == results
        assert evolution.generation == 3

    def test_max_score_never_decreases(self):
        config = EvolutionConfig(random_seed=8, max_ticks_per_game=300)
        evolution = Evolution(config, population=_reckless_population(3))
        maxima = [r.max_score for r in evolution.run(3)]
        assert maxima == sorted(maxima)

    def test_same_seed_same_outcome(self):
        def play():
            config = EvolutionConfig(random_seed=21, max_ticks_per_game=300)
            evolution = Evolution(config, population=_reckless_population(3))
            result = evolution.run_generation()
            return result.scores, [a.weights for a in evolution.population]

        assert play() == play()
