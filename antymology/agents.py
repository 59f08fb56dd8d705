"""
Antymology Agent Data Model
============================
Heritable genes and the mutable per-ant state record.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from .config import AgentConfig, AgentRole, GeneConfig

logger = logging.getLogger("Colony")

GridPosition = Tuple[int, int, int]


@dataclass(frozen=True)
class GeneSet:
    """The three heritable behaviour parameters"""
    exploration_rate: float = 0.5  # Chance of taking a random step
    digging_probability: float = 0.1  # Chance of digging near the queen
    food_seeking_weight: float = 1.0  # Scales the hunger threshold

    def clamped(self, config: GeneConfig) -> "GeneSet":
        """Copy with every gene clamped into its declared range"""
        return GeneSet(
            exploration_rate=float(np.clip(self.exploration_rate, *config.exploration_range)),
            digging_probability=float(np.clip(self.digging_probability, *config.digging_range)),
            food_seeking_weight=float(np.clip(self.food_seeking_weight, *config.food_seeking_range)),
        )

    def within(self, config: GeneConfig) -> bool:
        return self == self.clamped(config)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.exploration_rate, self.digging_probability, self.food_seeking_weight)

    @classmethod
    def random(cls, config: GeneConfig, role: AgentRole,
               rng: np.random.Generator) -> "GeneSet":
        """Generation 1 draw; queens use the narrower queen ranges"""
        if role is AgentRole.QUEEN:
            exploration = config.queen_exploration_init
            digging = config.queen_digging_init
            food_seeking = config.queen_food_seeking_init
        else:
            exploration = config.worker_exploration_init
            digging = config.worker_digging_init
            food_seeking = config.worker_food_seeking_init

        return cls(
            exploration_rate=float(rng.uniform(*exploration)),
            digging_probability=float(rng.uniform(*digging)),
            food_seeking_weight=float(rng.uniform(*food_seeking)),
        )


@dataclass
class AgentState:
    """Internal state of a single ant"""
    agent_id: int
    role: AgentRole
    position: GridPosition  # (x, y, z) grid coordinates
    genes: GeneSet = field(default_factory=GeneSet)
    max_health: float = 100.0
    health: Optional[float] = None  # Defaults to max_health
    health_decay_rate: float = 2.0
    alive: bool = True
    initialized: bool = False

    # Accumulators driven by the tick
    move_timer: float = 0.0
    nest_timer: float = 0.0

    # Queen only
    nests_produced: int = 0

    death_time: Optional[float] = None

    def __post_init__(self):
        if self.health is None:
            self.health = self.max_health
        self.health = float(np.clip(self.health, 0.0, self.max_health))
        self.position = tuple(int(c) for c in self.position)

    @classmethod
    def from_config(cls, agent_id: int, role: AgentRole, position: GridPosition,
                    genes: GeneSet, config: AgentConfig) -> "AgentState":
        return cls(
            agent_id=agent_id,
            role=role,
            position=position,
            genes=genes,
            max_health=config.max_health,
            health_decay_rate=config.health_decay_rate,
        )

    @property
    def is_queen(self) -> bool:
        return self.role is AgentRole.QUEEN

    @property
    def x(self) -> int:
        return self.position[0]

    @property
    def y(self) -> int:
        return self.position[1]

    @property
    def z(self) -> int:
        return self.position[2]

    def below(self) -> GridPosition:
        """Cell directly beneath the ant"""
        return (self.x, self.y - 1, self.z)

    def move_to(self, position: GridPosition) -> None:
        self.position = tuple(int(c) for c in position)

    def drop(self, layers: int = 1) -> None:
        self.position = (self.x, self.y - layers, self.z)

    def distance_to(self, other: "AgentState") -> float:
        """Euclidean distance in grid space"""
        return float(np.linalg.norm(np.subtract(self.position, other.position)))

    def health_fraction(self) -> float:
        return self.health / self.max_health

    def hunger_threshold(self, hunger_fraction: float = 0.6) -> float:
        return self.max_health * hunger_fraction * self.genes.food_seeking_weight

    def is_hungry(self, hunger_fraction: float = 0.6) -> bool:
        return self.health < self.hunger_threshold(hunger_fraction)

    def apply_health_delta(self, delta: float, time: Optional[float] = None) -> float:
        """
        Add delta to health, clamped into [0, max_health].

        Dead ants are unaffected. Reaching zero kills the ant.
        Returns the change actually applied.
        """
        if not self.alive:
            return 0.0
        before = self.health
        self.health = float(np.clip(self.health + delta, 0.0, self.max_health))
        if self.health <= 0:
            self.die(time)
        return self.health - before

    def restore_full_health(self) -> None:
        if self.alive:
            self.health = self.max_health

    def die(self, time: Optional[float] = None) -> bool:
        """
        Terminal transition. Returns True only on the first call.
        """
        if not self.alive:
            return False
        self.alive = False
        self.health = max(0.0, self.health)
        self.death_time = time
        logger.debug(f"{self.role.value} {self.agent_id} died at {self.position}")
        return True
