"""
Antymology Population Registry
===============================
Explicit membership list for the colony. Replaces scene-wide lookups:
policies receive the registry and scan it for the queen and for the
other ants.
"""

import logging
from typing import Iterator, List, Optional

from .agents import AgentState, GeneSet, GridPosition
from .config import AgentConfig, AgentRole

logger = logging.getLogger("Colony")


class PopulationRegistry:
    """
    Ordered collection of live and dead ants for the current generation.

    Order is spawn order; the queen is conventionally first. Ids keep
    increasing across generations.
    """

    def __init__(self, agent_config: Optional[AgentConfig] = None):
        self.agent_config = agent_config or AgentConfig()
        self.agents: List[AgentState] = []
        self._next_id = 0

    def __len__(self) -> int:
        return len(self.agents)

    def __iter__(self) -> Iterator[AgentState]:
        return iter(list(self.agents))

    def spawn_agent(self, role: AgentRole, genes: GeneSet,
                    position: GridPosition) -> AgentState:
        """Create and register a new, not yet initialized ant"""
        agent = AgentState.from_config(self._next_id, role, position, genes, self.agent_config)
        self._next_id += 1
        self.agents.append(agent)
        logger.debug(f"Spawned {role.value} {agent.agent_id} at {agent.position}")
        return agent

    def destroy_agent(self, agent: AgentState) -> None:
        """Remove an ant regardless of alive/dead status"""
        self.agents = [other for other in self.agents if other is not agent]

    def clear(self) -> None:
        for agent in list(self.agents):
            self.destroy_agent(agent)

    def current_queen(self) -> Optional[AgentState]:
        """
        First queen in population order, dead or alive.

        More than one queen is not expected; if it happens the earliest
        spawned one wins.
        """
        for agent in self.agents:
            if agent.is_queen:
                return agent
        return None

    def iterate_workers(self) -> Iterator[AgentState]:
        return (agent for agent in self.agents if not agent.is_queen)

    def others(self, agent: AgentState) -> Iterator[AgentState]:
        return (other for other in self.agents if other is not agent)

    def alive_count(self) -> int:
        return sum(1 for agent in self.agents if agent.alive)

    def alive_worker_count(self) -> int:
        return sum(1 for agent in self.iterate_workers() if agent.alive)
