"""
Antymology Evolution Engine
============================
Generational genetic algorithm over the colony's gene pool.

Lifecycle: SPAWNING -> RUNNING -> SCORING -> BREEDING -> RESPAWNING -> RUNNING

- Fitness: queen = 100 per nest (+50 if alive); worker = health + 20 if alive
- Elitism: top genes carried over unmutated
- Crossover: each gene taken from one of two parents (50/50)
- Mutation: per-gene additive uniform noise, clamped to the gene range
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .agents import AgentState, GeneSet, GridPosition
from .config import AgentRole, GenerationPhase, SimulationConfig
from .registry import PopulationRegistry
from .terrain import WorldGrid

logger = logging.getLogger("Evolution")


@dataclass
class FitnessEntry:
    """Score and genes of one ant at the end of a generation"""
    agent_id: int
    role: AgentRole
    fitness: float
    genes: GeneSet
    alive: bool


@dataclass
class GenerationRecord:
    """Summary statistics logged when a generation ends"""
    generation: int
    best_fitness: float
    mean_fitness: float
    alive_count: int
    population_count: int
    queen_nests: int
    queen_alive: bool
    queen_health: float
    new_record: bool


class EvolutionEngine:
    """
    Owns population membership and the generation clock.

    Agents act on their own between generation boundaries; the engine
    only spawns, scores, breeds and respawns.
    """

    def __init__(self, grid: WorldGrid, registry: PopulationRegistry,
                 config: SimulationConfig, rng: Optional[np.random.Generator] = None):
        self.grid = grid
        self.registry = registry
        self.config = config
        self.evo = config.evolution
        self.gene_config = config.genes
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)

        self.phase = GenerationPhase.SPAWNING
        self.generation = 0
        self.generation_timer = 0.0
        self.best_fitness_ever = 0.0
        self.history: List[GenerationRecord] = []

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    @property
    def time_remaining(self) -> float:
        return max(0.0, self.evo.generation_duration - self.generation_timer)

    def start(self) -> None:
        """Spawn generation 1 with randomized genes"""
        if self.generation > 0:
            return
        self.phase = GenerationPhase.SPAWNING
        self.generation = 1
        self.generation_timer = 0.0
        logger.info("=== Starting Generation 1 ===")

        genes = [GeneSet.random(self.gene_config, AgentRole.QUEEN, self.rng)]
        for _ in range(self.evo.population_size - 1):
            genes.append(GeneSet.random(self.gene_config, AgentRole.WORKER, self.rng))
        self.spawn_population(genes)
        self.phase = GenerationPhase.RUNNING

    def advance(self, dt: float) -> bool:
        """Accumulate generation time; evolve when the generation ends"""
        if self.generation == 0:
            self.start()
        self.generation_timer += dt
        if self.generation_timer >= self.evo.generation_duration:
            self.evolve()
            return True
        return False

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------

    def queen_spawn_position(self) -> GridPosition:
        x, z = self.evo.nest_origin
        return (x, self.grid.surface_height(x, z), z)

    def worker_spawn_positions(self, n_workers: int) -> List[GridPosition]:
        """Evenly spaced points on a circle around the nest origin"""
        ox, oz = self.evo.nest_origin
        positions = []
        for i in range(n_workers):
            angle = (i / n_workers) * 2.0 * np.pi
            x = int(round(ox + np.cos(angle) * self.evo.worker_spawn_radius))
            z = int(round(oz + np.sin(angle) * self.evo.worker_spawn_radius))
            positions.append((x, self.grid.surface_height(x, z), z))
        return positions

    def spawn_population(self, genes: List[GeneSet]) -> List[AgentState]:
        """Queen takes genes[0]; workers take the rest"""
        if not genes:
            return []
        spawned = [self.registry.spawn_agent(AgentRole.QUEEN, genes[0],
                                             self.queen_spawn_position())]
        worker_genes = genes[1:]
        positions = self.worker_spawn_positions(len(worker_genes))
        for gene_set, position in zip(worker_genes, positions):
            spawned.append(self.registry.spawn_agent(AgentRole.WORKER, gene_set, position))
        return spawned

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def fitness(self, agent: AgentState) -> float:
        if agent.is_queen:
            score = agent.nests_produced * self.evo.nest_fitness
            if agent.alive:
                score += self.evo.queen_survival_bonus
            return score
        if agent.alive:
            return agent.health + self.evo.worker_survival_bonus
        return 0.0

    def score_population(self) -> List[FitnessEntry]:
        """Fitness for every tracked ant, best first; ties keep population order"""
        entries = [
            FitnessEntry(
                agent_id=agent.agent_id,
                role=agent.role,
                fitness=float(self.fitness(agent)),
                genes=agent.genes,
                alive=agent.alive,
            )
            for agent in self.registry.agents
        ]
        return sorted(entries, key=lambda entry: entry.fitness, reverse=True)

    def record_generation(self, ranked: List[FitnessEntry]) -> GenerationRecord:
        queen = self.registry.current_queen()
        best = ranked[0].fitness if ranked else 0.0
        mean = float(np.mean([entry.fitness for entry in ranked])) if ranked else 0.0
        new_record = best > self.best_fitness_ever
        if new_record:
            self.best_fitness_ever = best

        record = GenerationRecord(
            generation=self.generation,
            best_fitness=best,
            mean_fitness=mean,
            alive_count=sum(1 for entry in ranked if entry.alive),
            population_count=len(ranked),
            queen_nests=queen.nests_produced if queen is not None else 0,
            queen_alive=queen.alive if queen is not None else False,
            queen_health=queen.health if queen is not None else 0.0,
            new_record=new_record,
        )
        self.history.append(record)

        logger.info(f"=== Generation {record.generation} Complete ===")
        if queen is not None:
            logger.info(f"Nests Produced: {record.queen_nests}")
            status = "ALIVE" if record.queen_alive else "DEAD"
            logger.info(f"Queen Status: {status} - Health: {record.queen_health:.1f}")
        logger.info(f"Best Fitness: {record.best_fitness:.1f}")
        logger.info(f"Avg Fitness: {record.mean_fitness:.1f}")
        logger.info(f"Alive: {record.alive_count}/{record.population_count}")
        if new_record:
            logger.info(f"*** NEW RECORD: {self.best_fitness_ever:.1f} ***")
        return record

    # ------------------------------------------------------------------
    # Breeding
    # ------------------------------------------------------------------

    def crossover(self, parent1: GeneSet, parent2: GeneSet) -> GeneSet:
        """Uniform crossover: each gene from either parent with equal odds"""
        return GeneSet(
            exploration_rate=(parent1.exploration_rate if self.rng.random() < 0.5
                              else parent2.exploration_rate),
            digging_probability=(parent1.digging_probability if self.rng.random() < 0.5
                                 else parent2.digging_probability),
            food_seeking_weight=(parent1.food_seeking_weight if self.rng.random() < 0.5
                                 else parent2.food_seeking_weight),
        )

    def mutate(self, genes: GeneSet) -> GeneSet:
        """Independent per-gene perturbation, then clamp into range"""
        amount = self.evo.mutation_amount
        values = list(genes.as_tuple())
        for i in range(len(values)):
            if self.rng.random() < self.evo.mutation_chance:
                values[i] += self.rng.uniform(-amount, amount)
        return GeneSet(*values).clamped(self.gene_config)

    def breeding_pool_size(self, n_ranked: int) -> int:
        return min(max(2, n_ranked // 2), n_ranked)

    def breed(self, ranked: List[FitnessEntry]) -> List[GeneSet]:
        """
        Next generation's genes, in rank order for the elites.

        The queen slot (index 0) therefore goes to the best performer.
        """
        size = self.evo.population_size
        n_elite = min(self.evo.elite_count, len(ranked), size)
        new_genes = [ranked[i].genes for i in range(n_elite)]

        pool = self.breeding_pool_size(len(ranked))
        while len(new_genes) < size:
            if pool == 0:
                new_genes.append(GeneSet.random(self.gene_config, AgentRole.WORKER, self.rng))
                continue
            parent1 = ranked[self.rng.integers(pool)].genes
            parent2 = ranked[self.rng.integers(pool)].genes
            new_genes.append(self.mutate(self.crossover(parent1, parent2)))
        return new_genes

    # ------------------------------------------------------------------
    # Generation boundary
    # ------------------------------------------------------------------

    def respawn(self, genes: List[GeneSet]) -> List[AgentState]:
        self.phase = GenerationPhase.RESPAWNING
        self.registry.clear()
        self.generation += 1
        self.generation_timer = 0.0
        logger.info(f"=== Starting Generation {self.generation} ===")
        spawned = self.spawn_population(genes)
        self.phase = GenerationPhase.RUNNING
        return spawned

    def evolve(self) -> GenerationRecord:
        self.phase = GenerationPhase.SCORING
        ranked = self.score_population()
        record = self.record_generation(ranked)

        self.phase = GenerationPhase.BREEDING
        genes = self.breed(ranked)

        self.respawn(genes)
        return record
