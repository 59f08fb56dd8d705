"""
Antymology Simulator
=====================
An evolving ant colony on a voxel terrain.

Each ant carries three heritable genes (exploration rate, digging
probability, food seeking weight) that drive a priority-ordered
decision policy. A single queen turns her health into nest blocks.
At the end of every generation a genetic algorithm scores the colony,
keeps the elite genes, breeds the rest and respawns everyone.

Modules:
--------
- config: Configuration dataclasses, enums and defaults
- terrain: Voxel block store and terrain generation
- agents: Gene sets and per-ant state
- registry: Population membership
- policy: Worker and queen decision policies
- evolution: Fitness, selection, crossover, mutation, respawn
- simulation: Tick driver and telemetry
- main: CLI and plotting

Example Usage:
--------------
>>> from antymology import ColonySimulation, create_small_test_config
>>> sim = ColonySimulation(create_small_test_config())
>>> history = sim.run_generations(3)
>>> sim.telemetry().summary_lines()
"""

__version__ = "1.0.0"

# Configuration
from .config import (
    SimulationConfig,
    TerrainConfig,
    GeneConfig,
    AgentConfig,
    QueenConfig,
    EvolutionConfig,
    create_default_config,
    create_small_test_config,
    create_large_scale_config,
    BlockKind,
    AgentRole,
    ActionType,
    GenerationPhase,
)

# World and population
from .terrain import WorldGrid, generate_terrain
from .agents import AgentState, GeneSet
from .registry import PopulationRegistry

# Behaviour and evolution
from .policy import DecisionPolicy, QueenPolicy
from .evolution import EvolutionEngine, FitnessEntry, GenerationRecord

# Driver
from .simulation import ColonySimulation, ColonyTelemetry
from .main import run_simulation, visualize_history, print_config_summary

__all__ = [
    "__version__",

    # Configuration
    "SimulationConfig",
    "TerrainConfig",
    "GeneConfig",
    "AgentConfig",
    "QueenConfig",
    "EvolutionConfig",
    "create_default_config",
    "create_small_test_config",
    "create_large_scale_config",
    "BlockKind",
    "AgentRole",
    "ActionType",
    "GenerationPhase",

    # World and population
    "WorldGrid",
    "generate_terrain",
    "AgentState",
    "GeneSet",
    "PopulationRegistry",

    # Behaviour and evolution
    "DecisionPolicy",
    "QueenPolicy",
    "EvolutionEngine",
    "FitnessEntry",
    "GenerationRecord",

    # Driver
    "ColonySimulation",
    "ColonyTelemetry",
    "run_simulation",
    "visualize_history",
    "print_config_summary",
]
