"""
Antymology Decision Policies
=============================
Priority-ordered behaviour for workers and the queen.

Each decision evaluates, in order, and stops at the first rule that applies:
1. Donate health to the queen (same cell, donor healthy, queen weak)
2. Walk toward the queen (far away, donor healthy, queen weaker)
3. Eat the mulch underfoot, or step toward the nearest visible mulch
4. Dig near the queen (gene-controlled probability)
5. Explore (gene-controlled probability)

Health decay runs before every decision. Movement is a single greedy
step that must land on a walkable surface within the step height.
Nothing here raises for an infeasible action; it just doesn't happen.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from .agents import AgentState, GridPosition
from .config import (
    ActionType, AgentConfig, BlockKind, QueenConfig, UNDIGGABLE_BLOCKS,
)
from .registry import PopulationRegistry
from .terrain import WorldGrid

queen_logger = logging.getLogger("Queen")

# 8-connected X/Z offsets for a random step
EXPLORE_OFFSETS: List[Tuple[int, int]] = [
    (dx, dz) for dx in (-1, 0, 1) for dz in (-1, 0, 1) if (dx, dz) != (0, 0)
]


class DecisionPolicy:
    """
    Worker decision pipeline.

    Holds read/write access to the terrain and a random generator; the
    population is passed in on every call so the policy never looks
    agents up globally.
    """

    def __init__(self, grid: WorldGrid, config: Optional[AgentConfig] = None,
                 rng: Optional[np.random.Generator] = None):
        self.grid = grid
        self.config = config or AgentConfig()
        self.rng = rng if rng is not None else np.random.default_rng()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, agent: AgentState) -> None:
        """Snap a freshly spawned ant onto the surface of its column"""
        x, y, z = agent.position
        surface = self.grid.find_surface(x, z, y, self.config.surface_search_window)
        if surface is not None:
            agent.move_to((x, surface, z))
        agent.initialized = True

    def step(self, agent: AgentState, dt: float, registry: PopulationRegistry,
             time: Optional[float] = None) -> ActionType:
        """Decay health, then decide once the move interval has elapsed"""
        if not agent.alive:
            return ActionType.DEAD

        if not self.decay(agent, dt, time):
            return ActionType.DEAD

        agent.move_timer += dt
        if agent.move_timer < self.config.move_interval:
            return ActionType.IDLE
        agent.move_timer = 0.0

        return self.decide(agent, registry)

    def decay(self, agent: AgentState, dt: float, time: Optional[float] = None) -> bool:
        """Apply health decay; acidic ground doubles it. Returns alive flag."""
        amount = agent.health_decay_rate * dt
        if self.grid.get_block(*agent.below()) is BlockKind.ACIDIC:
            amount *= self.config.acidic_decay_multiplier
        agent.apply_health_delta(-amount, time)
        return agent.alive

    def decide(self, agent: AgentState, registry: PopulationRegistry) -> ActionType:
        if not agent.alive:
            return ActionType.DEAD

        cfg = self.config
        queen = registry.current_queen()
        helpable = (queen is not None and queen is not agent
                    and queen.alive and queen.initialized)

        if helpable:
            if (agent.position == queen.position
                    and agent.health > agent.max_health * cfg.donate_min_health
                    and queen.health < queen.max_health * cfg.donate_queen_below):
                self.donate(agent, queen)
                return ActionType.DONATE

            if (agent.distance_to(queen) > cfg.approach_distance
                    and agent.health > agent.max_health * cfg.approach_min_health
                    and queen.health < queen.max_health * cfg.approach_queen_below):
                self.step_toward(agent, queen.position)
                return ActionType.APPROACH_QUEEN

        if agent.is_hungry(cfg.hunger_fraction):
            if self.try_eat(agent, registry):
                return ActionType.EAT
            if self.seek_food(agent):
                return ActionType.SEEK_FOOD

        if (queen is not None and queen.initialized
                and agent.distance_to(queen) < cfg.dig_distance
                and self.rng.random() < agent.genes.digging_probability):
            self.try_dig(agent)
            return ActionType.DIG

        if self.explore(agent):
            return ActionType.EXPLORE
        return ActionType.IDLE

    # ------------------------------------------------------------------
    # Queen support
    # ------------------------------------------------------------------

    def donate(self, agent: AgentState, queen: AgentState) -> bool:
        """Give a fixed share of max health to the queen if affordable"""
        if agent.position != queen.position:
            return False
        donation = agent.max_health * self.config.donation_fraction
        if agent.health <= donation:
            return False
        agent.apply_health_delta(-donation)
        queen.apply_health_delta(donation)
        return True

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    def try_move(self, agent: AgentState, x: int, z: int) -> bool:
        """Move onto column (x, z) if it has a reachable surface"""
        surface = self.grid.find_surface(x, z, agent.y, self.config.surface_search_window)
        if surface is None or abs(surface - agent.y) > self.config.max_step_height:
            return False
        agent.move_to((x, surface, z))
        return True

    def step_toward(self, agent: AgentState, target: GridPosition) -> bool:
        """One unit step on whichever of X/Z is farther off; ties go to Z"""
        off_x = target[0] - agent.x
        off_z = target[2] - agent.z
        dx = dz = 0
        if abs(off_x) > abs(off_z):
            dx = 1 if off_x > 0 else -1
        elif off_z != 0:
            dz = 1 if off_z > 0 else -1
        else:
            return False
        return self.try_move(agent, agent.x + dx, agent.z + dz)

    def explore(self, agent: AgentState) -> bool:
        if self.rng.random() > agent.genes.exploration_rate:
            return False
        dx, dz = EXPLORE_OFFSETS[self.rng.integers(len(EXPLORE_OFFSETS))]
        return self.try_move(agent, agent.x + dx, agent.z + dz)

    # ------------------------------------------------------------------
    # Foraging
    # ------------------------------------------------------------------

    def _claims_mulch_first(self, agent: AgentState, other: AgentState) -> bool:
        """
        Whether other has priority over agent for the block they share.

        Bystanders always keep the block; between two hungry ants the
        earlier spawned one eats.
        """
        if not other.is_hungry(self.config.hunger_fraction):
            return True
        return other.agent_id < agent.agent_id

    def try_eat(self, agent: AgentState, registry: PopulationRegistry) -> bool:
        """Consume the mulch block underfoot unless another ant holds it"""
        below = agent.below()
        if self.grid.get_block(*below) is not BlockKind.MULCH:
            return False

        for other in registry.others(agent):
            if (other.alive and other.initialized and other.below() == below
                    and self._claims_mulch_first(agent, other)):
                return False

        agent.restore_full_health()
        self.grid.set_block(*below, BlockKind.EMPTY)
        agent.drop()
        return True

    def find_nearest_mulch(self, agent: AgentState) -> Optional[GridPosition]:
        """
        Nearest mulch block around the ant, excluding its own column.

        Returns the cell on top of the block.
        """
        radius = self.config.food_search_radius
        layers = self.config.food_search_layers
        best: Optional[GridPosition] = None
        best_distance = float("inf")

        for dx in range(-radius, radius + 1):
            for dz in range(-radius, radius + 1):
                if dx == 0 and dz == 0:
                    continue
                for dy in range(-layers, layers + 1):
                    cx, cy, cz = agent.x + dx, agent.y + dy, agent.z + dz
                    if self.grid.get_block(cx, cy, cz) is not BlockKind.MULCH:
                        continue
                    distance = float(np.sqrt(dx * dx + dy * dy + dz * dz))
                    if distance < best_distance:
                        best_distance = distance
                        best = (cx, cy + 1, cz)
        return best

    def seek_food(self, agent: AgentState) -> bool:
        target = self.find_nearest_mulch(agent)
        if target is None:
            return False
        return self.step_toward(agent, target)

    # ------------------------------------------------------------------
    # Digging
    # ------------------------------------------------------------------

    def try_dig(self, agent: AgentState) -> bool:
        below = agent.below()
        if self.grid.get_block(*below) in UNDIGGABLE_BLOCKS:
            return False
        self.grid.set_block(*below, BlockKind.EMPTY)
        agent.drop()
        return True


class QueenPolicy:
    """
    Queen behaviour: the shared worker pipeline plus periodic nest
    production. Built by composition over a DecisionPolicy.
    """

    def __init__(self, base: DecisionPolicy, config: Optional[QueenConfig] = None):
        self.base = base
        self.config = config or QueenConfig()

    @property
    def grid(self) -> WorldGrid:
        return self.base.grid

    def initialize(self, agent: AgentState) -> None:
        self.base.initialize(agent)

    def step(self, agent: AgentState, dt: float, registry: PopulationRegistry,
             time: Optional[float] = None) -> ActionType:
        action = self.base.step(agent, dt, registry, time)
        if agent.alive:
            self.tick_nest(agent, dt)
        return action

    def tick_nest(self, agent: AgentState, dt: float) -> bool:
        agent.nest_timer += dt
        if (agent.nest_timer >= self.config.nest_interval
                and agent.health > self.config.min_health_to_nest):
            agent.nest_timer = 0.0
            return self.produce_nest(agent)
        return False

    def produce_nest(self, agent: AgentState) -> bool:
        """
        Pay a share of max health (a third by default) for a nest block.

        The nest goes into the queen's own cell (she climbs on top of it)
        or, failing that, into an empty cell beneath her. The cost is
        refunded when neither placement works.
        """
        cost = agent.max_health * self.config.nest_cost_fraction
        # Paying must leave the queen alive
        if agent.health <= cost:
            return False

        agent.apply_health_delta(-cost)
        x, y, z = agent.position

        if self.grid.get_block(x, y, z) in (BlockKind.EMPTY, BlockKind.NEST):
            self.grid.set_block(x, y, z, BlockKind.NEST)
            agent.move_to((x, y + 1, z))
        elif self.grid.get_block(x, y - 1, z) is BlockKind.EMPTY:
            self.grid.set_block(x, y - 1, z, BlockKind.NEST)
        else:
            agent.apply_health_delta(cost)
            return False

        agent.nests_produced += 1
        queen_logger.debug(
            f"Queen {agent.agent_id} built nest #{agent.nests_produced} at {(x, y, z)}, "
            f"health={agent.health:.1f}"
        )
        return True
