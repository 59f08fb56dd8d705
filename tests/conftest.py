"""
Pytest configuration and shared fixtures for Antymology tests.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


FLAT_SURFACE_Y = 4


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests"""
    return np.random.default_rng(42)


@pytest.fixture
def flat_grid():
    """16x12x16 stone world whose walkable surface is layer 4"""
    from antymology.terrain import WorldGrid
    return WorldGrid.flat(16, 12, 16, surface_y=FLAT_SURFACE_Y)


@pytest.fixture
def agent_config():
    """Agent configuration that decides on every tick"""
    from antymology.config import AgentConfig
    return AgentConfig(move_interval=0.0)


@pytest.fixture
def queen_config():
    """Default queen configuration"""
    from antymology.config import QueenConfig
    return QueenConfig()


@pytest.fixture
def simulation_config():
    """Small simulation configuration"""
    from antymology.config import create_small_test_config
    return create_small_test_config()


@pytest.fixture
def registry(agent_config):
    """Empty population registry"""
    from antymology.registry import PopulationRegistry
    return PopulationRegistry(agent_config)


@pytest.fixture
def worker_policy(flat_grid, agent_config, rng):
    """Worker decision policy on the flat world"""
    from antymology.policy import DecisionPolicy
    return DecisionPolicy(flat_grid, agent_config, rng)


@pytest.fixture
def queen_policy(worker_policy, queen_config):
    """Queen policy sharing the worker pipeline"""
    from antymology.policy import QueenPolicy
    return QueenPolicy(worker_policy, queen_config)


@pytest.fixture
def spawn(registry, worker_policy):
    """Factory: register an initialized ant on the flat world"""
    from antymology.agents import GeneSet
    from antymology.config import AgentRole

    def _spawn(x, z, role=AgentRole.WORKER, health=None, genes=None, y=FLAT_SURFACE_Y):
        agent = registry.spawn_agent(role, genes or GeneSet(), (x, y, z))
        worker_policy.initialize(agent)
        if health is not None:
            agent.health = health
        return agent

    return _spawn


class FixedRandom:
    """Stand-in generator returning scripted draws"""

    def __init__(self, value=0.0, index=0):
        self.value = value
        self.index = index

    def random(self):
        return self.value

    def integers(self, high):
        return self.index % high

    def uniform(self, low, high):
        return low + (high - low) * self.value


@pytest.fixture
def fixed_random():
    return FixedRandom
