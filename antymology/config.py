"""
Antymology Simulator Configuration
===================================
Configuration system for the evolving ant colony.
All hyperparameters for terrain, agents, the queen and evolution.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple
from enum import Enum


class BlockKind(Enum):
    """Voxel block types understood by the colony"""
    EMPTY = 0
    MULCH = 1
    ACIDIC = 2
    NEST = 3
    CONTAINER = 4
    STONE = 5
    GRASS = 6

    @property
    def is_solid(self) -> bool:
        return self is not BlockKind.EMPTY


# Blocks an ant can never dig out
UNDIGGABLE_BLOCKS = frozenset({
    BlockKind.CONTAINER,
    BlockKind.EMPTY,
    BlockKind.ACIDIC,
    BlockKind.NEST,
})


class AgentRole(Enum):
    """Colony member roles"""
    WORKER = "worker"
    QUEEN = "queen"


class ActionType(Enum):
    """Outcome of one decision step"""
    DEAD = "dead"
    IDLE = "idle"
    DONATE = "donate"
    APPROACH_QUEEN = "approach_queen"
    EAT = "eat"
    SEEK_FOOD = "seek_food"
    DIG = "dig"
    EXPLORE = "explore"


class GenerationPhase(Enum):
    """Evolution engine lifecycle states"""
    SPAWNING = "spawning"
    RUNNING = "running"
    SCORING = "scoring"
    BREEDING = "breeding"
    RESPAWNING = "respawning"


@dataclass
class TerrainConfig:
    """Voxel terrain configuration"""
    # World dimensions (x, y, z); y is vertical
    width: int = 40
    height: int = 24
    depth: int = 40

    # Height field
    base_height: int = 8  # Mean surface height
    height_variation: float = 3.0  # Amplitude of surface noise
    smoothing_sigma: float = 3.0  # Gaussian smoothing of the noise field

    # Surface block mix
    mulch_probability: float = 0.08
    acidic_probability: float = 0.03
    grass_depth: int = 1  # Grass layer thickness on top of stone

    # Surface discovery for spawning
    spawn_scan_height: int = 50  # Top-down scan start
    fallback_surface_height: int = 10  # Used when a column has no surface


@dataclass
class GeneConfig:
    """Heritable gene ranges"""
    # Clamp ranges (always enforced after mutation)
    exploration_range: Tuple[float, float] = (0.1, 1.0)
    digging_range: Tuple[float, float] = (0.0, 0.5)
    food_seeking_range: Tuple[float, float] = (0.3, 2.0)

    # Generation 1 initial draws
    worker_exploration_init: Tuple[float, float] = (0.3, 0.8)
    worker_digging_init: Tuple[float, float] = (0.05, 0.3)
    worker_food_seeking_init: Tuple[float, float] = (0.5, 1.5)

    # Queens stay near the nest
    queen_exploration_init: Tuple[float, float] = (0.1, 0.2)
    queen_digging_init: Tuple[float, float] = (0.01, 0.05)
    queen_food_seeking_init: Tuple[float, float] = (0.8, 1.2)


@dataclass
class AgentConfig:
    """Worker behaviour configuration"""
    max_health: float = 100.0
    health_decay_rate: float = 2.0  # Per unit time
    acidic_decay_multiplier: float = 2.0

    # Decision cadence; 0 means decide every tick
    move_interval: float = 0.5

    # Terrain movement
    max_step_height: int = 2  # Largest climb/drop per move
    surface_search_window: int = 2  # +/- layers scanned for a surface

    # Queen support thresholds (fractions of max health)
    donate_min_health: float = 0.7
    donate_queen_below: float = 0.8
    donation_fraction: float = 0.25
    approach_min_health: float = 0.6
    approach_queen_below: float = 0.7
    approach_distance: float = 3.0

    # Foraging
    hunger_fraction: float = 0.6  # Scaled by the food seeking gene
    food_search_radius: int = 3  # Columns in X/Z
    food_search_layers: int = 2  # Layers above and below

    # Digging
    dig_distance: float = 5.0


@dataclass
class QueenConfig:
    """Queen nest production configuration"""
    nest_interval: float = 3.0
    min_health_to_nest: float = 40.0
    nest_cost_fraction: float = 1.0 / 3.0  # Fraction of max health per nest


@dataclass
class EvolutionConfig:
    """Genetic algorithm configuration"""
    population_size: int = 15
    generation_duration: float = 50.0

    mutation_chance: float = 0.3
    mutation_amount: float = 0.2
    elite_count: int = 3

    # Fitness weights
    nest_fitness: float = 100.0
    queen_survival_bonus: float = 50.0
    worker_survival_bonus: float = 20.0

    # Spawning
    nest_origin: Tuple[int, int] = (20, 20)  # (x, z) column
    worker_spawn_radius: float = 5.0


@dataclass
class SimulationConfig:
    """Master configuration combining all subsystems"""
    terrain: TerrainConfig = field(default_factory=TerrainConfig)
    genes: GeneConfig = field(default_factory=GeneConfig)
    agent: AgentConfig = field(default_factory=AgentConfig)
    queen: QueenConfig = field(default_factory=QueenConfig)
    evolution: EvolutionConfig = field(default_factory=EvolutionConfig)

    # Driver
    dt: float = 0.1
    seed: Optional[int] = None
    scenario_name: str = "default"

    def validate(self):
        """Validate configuration consistency"""
        evo = self.evolution
        if evo.population_size < 1:
            raise ValueError("evolution.population_size must be at least 1")
        if evo.generation_duration <= 0:
            raise ValueError("evolution.generation_duration must be positive")
        if not 0.0 <= evo.mutation_chance <= 1.0:
            raise ValueError("evolution.mutation_chance must be in [0, 1]")
        if evo.mutation_amount < 0:
            raise ValueError("evolution.mutation_amount must be non-negative")
        if evo.elite_count < 0:
            raise ValueError("evolution.elite_count must be non-negative")
        if self.dt <= 0:
            raise ValueError("dt must be positive")
        if self.agent.max_health <= 0:
            raise ValueError("agent.max_health must be positive")
        if self.agent.move_interval < 0:
            raise ValueError("agent.move_interval must be non-negative")
        if self.queen.nest_interval <= 0:
            raise ValueError("queen.nest_interval must be positive")
        if not 0.0 < self.queen.nest_cost_fraction <= 1.0:
            raise ValueError("queen.nest_cost_fraction must be in (0, 1]")
        if self.queen.min_health_to_nest < 0:
            raise ValueError("queen.min_health_to_nest must be non-negative")

        clamp_ranges = {
            "exploration": self.genes.exploration_range,
            "digging": self.genes.digging_range,
            "food_seeking": self.genes.food_seeking_range,
        }
        for name, (low, high) in clamp_ranges.items():
            if low > high:
                raise ValueError(f"genes.{name}_range is inverted: {(low, high)}")
            for role in ("worker", "queen"):
                init = getattr(self.genes, f"{role}_{name}_init")
                if init[0] > init[1] or init[0] < low or init[1] > high:
                    raise ValueError(
                        f"genes.{role}_{name}_init {init} must lie within {(low, high)}"
                    )

        x, z = evo.nest_origin
        if not (0 <= x < self.terrain.width and 0 <= z < self.terrain.depth):
            raise ValueError(f"evolution.nest_origin {evo.nest_origin} is outside the terrain")

        return True


def create_default_config() -> SimulationConfig:
    """Create default configuration"""
    return SimulationConfig()


def create_small_test_config() -> SimulationConfig:
    """Create small configuration for testing"""
    config = SimulationConfig()
    config.terrain.width = 16
    config.terrain.depth = 16
    config.terrain.height = 16
    config.terrain.base_height = 5
    config.evolution.population_size = 5
    config.evolution.generation_duration = 5.0
    config.evolution.nest_origin = (8, 8)
    config.evolution.worker_spawn_radius = 3.0
    config.seed = 42
    return config


def create_large_scale_config() -> SimulationConfig:
    """Create large-scale configuration for long evolutionary runs"""
    config = SimulationConfig()
    config.terrain.width = 96
    config.terrain.depth = 96
    config.terrain.height = 32
    config.terrain.base_height = 12
    config.evolution.population_size = 40
    config.evolution.nest_origin = (48, 48)
    config.evolution.worker_spawn_radius = 10.0
    return config
