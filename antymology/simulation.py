"""
Antymology Colony Simulation
=============================
Single-threaded tick driver tying the terrain, the population, the
decision policies and the evolution engine together.

One step(dt):
1. Initialize ants spawned since the previous step
2. Run each ant's policy once, in population order
3. Advance the generation clock (may score, breed and respawn)
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from .agents import AgentState
from .config import ActionType, AgentRole, SimulationConfig, create_default_config
from .evolution import EvolutionEngine, GenerationRecord
from .policy import DecisionPolicy, QueenPolicy
from .registry import PopulationRegistry
from .terrain import WorldGrid, generate_terrain


@dataclass
class ColonyTelemetry:
    """Read-only snapshot for presentation layers"""
    generation: int
    time_remaining: float
    alive_count: int
    alive_workers: int
    agents: List[Tuple[int, AgentRole, bool, float]] = field(default_factory=list)
    queen_nests: Optional[int] = None
    queen_health: Optional[float] = None
    queen_max_health: Optional[float] = None
    queen_alive: Optional[bool] = None

    def summary_lines(self) -> List[str]:
        lines = [
            f"Nests: {self.queen_nests or 0}",
            f"Generation: {self.generation}",
            f"Alive: {self.alive_count} ({self.alive_workers} workers)",
        ]
        if self.queen_health is None:
            lines.append("Queen: NONE")
        else:
            percent = self.queen_health / self.queen_max_health * 100.0
            status = "ALIVE" if self.queen_alive else "DEAD"
            lines.append(
                f"Queen: {status} - {self.queen_health:.0f}/{self.queen_max_health:.0f} "
                f"({percent:.0f}%)"
            )
        minutes, seconds = divmod(int(self.time_remaining), 60)
        lines.append(f"Next Gen: {minutes:02d}:{seconds:02d}")
        return lines


class ColonySimulation:
    """
    Headless colony simulation.

    Example:
        >>> sim = ColonySimulation(create_small_test_config())
        >>> sim.run_generations(3)
    """

    def __init__(self, config: Optional[SimulationConfig] = None,
                 grid: Optional[WorldGrid] = None,
                 rng: Optional[np.random.Generator] = None):
        self.config = config or create_default_config()
        self.config.validate()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        self.grid = grid if grid is not None else generate_terrain(self.config.terrain, self.rng)
        self.registry = PopulationRegistry(self.config.agent)

        self.worker_policy = DecisionPolicy(self.grid, self.config.agent, self.rng)
        self.queen_policy = QueenPolicy(self.worker_policy, self.config.queen)
        self.engine = EvolutionEngine(self.grid, self.registry, self.config, self.rng)

        self.time = 0.0
        self.tick_count = 0

    def policy_for(self, agent: AgentState):
        return self.queen_policy if agent.is_queen else self.worker_policy

    def start(self) -> None:
        self.engine.start()

    def step(self, dt: Optional[float] = None) -> Dict[int, ActionType]:
        """Advance the whole colony by one tick; returns each ant's action"""
        dt = self.config.dt if dt is None else dt
        if self.engine.generation == 0:
            self.start()

        self.time += dt
        self.tick_count += 1

        actions: Dict[int, ActionType] = {}
        for agent in self.registry:
            policy = self.policy_for(agent)
            if not agent.initialized:
                policy.initialize(agent)
            actions[agent.agent_id] = policy.step(agent, dt, self.registry, self.time)

        self.engine.advance(dt)
        return actions

    def run_generations(self, n_generations: int,
                        dt: Optional[float] = None) -> List[GenerationRecord]:
        """Step until n more generations have been scored"""
        step_dt = self.config.dt if dt is None else dt
        if step_dt <= 0:
            raise ValueError(f"dt must be positive, got {step_dt}")
        target = len(self.engine.history) + n_generations
        while len(self.engine.history) < target:
            self.step(dt)
        return self.engine.history[-n_generations:] if n_generations > 0 else []

    def telemetry(self) -> ColonyTelemetry:
        queen = self.registry.current_queen()
        snapshot = ColonyTelemetry(
            generation=self.engine.generation,
            time_remaining=self.engine.time_remaining,
            alive_count=self.registry.alive_count(),
            alive_workers=self.registry.alive_worker_count(),
            agents=[(a.agent_id, a.role, a.alive, a.health) for a in self.registry.agents],
        )
        if queen is not None:
            snapshot.queen_nests = queen.nests_produced
            snapshot.queen_health = queen.health
            snapshot.queen_max_health = queen.max_health
            snapshot.queen_alive = queen.alive
        return snapshot
