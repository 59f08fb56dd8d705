"""
Antymology Main Simulation Runner
==================================
Entry point for running headless colony evolution.

Provides:
- CLI interface
- Scenario configurations
- Fitness history plotting
"""

import argparse
import json
import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from .config import SimulationConfig, create_default_config, create_small_test_config
from .evolution import GenerationRecord
from .simulation import ColonySimulation

logger = logging.getLogger("Antymology")


def create_scenario_config(scenario: str = "standard") -> SimulationConfig:
    """
    Create configuration for a named scenario.

    Args:
        scenario: One of "small", "standard", "harsh", "fertile"

    Returns:
        SimulationConfig for the scenario
    """
    if scenario == "small":
        return create_small_test_config()

    config = create_default_config()

    if scenario == "harsh":
        # Little food, lots of acid
        config.terrain.mulch_probability = 0.02
        config.terrain.acidic_probability = 0.10

    elif scenario == "fertile":
        # Abundant food, flat ground
        config.terrain.mulch_probability = 0.20
        config.terrain.acidic_probability = 0.0
        config.terrain.height_variation = 1.0

    return config


def run_simulation(
    config: Optional[SimulationConfig] = None,
    n_generations: int = 10,
    dt: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Evolve the colony for a number of generations.

    Args:
        config: Simulation configuration
        n_generations: Generations to score
        dt: Tick length (defaults to config.dt)

    Returns:
        Results dictionary with per-generation records
    """
    sim = ColonySimulation(config)
    history = sim.run_generations(n_generations, dt)
    return {
        "history": history,
        "best_fitness_ever": sim.engine.best_fitness_ever,
        "generation": sim.engine.generation,
        "ticks": sim.tick_count,
        "telemetry": sim.telemetry(),
    }


def visualize_history(history: List[GenerationRecord], output_path: Optional[str] = None):
    """
    Plot fitness and colony statistics per generation.

    Args:
        history: Records from run_simulation
        output_path: Path to save figure (optional)
    """
    try:
        import matplotlib
        if output_path:
            matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        logger.warning("Matplotlib required for visualization")
        return

    generations = [r.generation for r in history]

    fig, axes = plt.subplots(1, 3, figsize=(15, 4))

    axes[0].plot(generations, [r.best_fitness for r in history], label="best")
    axes[0].plot(generations, [r.mean_fitness for r in history], label="mean")
    axes[0].set_xlabel("Generation")
    axes[0].set_ylabel("Fitness")
    axes[0].set_title("Fitness")
    axes[0].legend()

    axes[1].plot(generations, [r.alive_count for r in history])
    axes[1].set_xlabel("Generation")
    axes[1].set_ylabel("Alive at end")
    axes[1].set_title("Colony Survival")

    axes[2].bar(generations, [r.queen_nests for r in history])
    axes[2].set_xlabel("Generation")
    axes[2].set_ylabel("Nests")
    axes[2].set_title("Nest Production")

    plt.tight_layout()

    if output_path:
        plt.savefig(output_path)
        logger.info(f"Saved visualization to {output_path}")
        plt.close(fig)
    else:
        plt.show()


def print_config_summary(config: SimulationConfig):
    """Print a summary of the configuration"""
    evo = config.evolution
    print("\n" + "=" * 60)
    print("Antymology Configuration Summary")
    print("=" * 60)
    print(f"Terrain: {config.terrain.width}x{config.terrain.height}x{config.terrain.depth}")
    print(f"Population size: {evo.population_size}")
    print(f"Generation duration: {evo.generation_duration}")
    print(f"Time step: {config.dt}")
    print()
    print("Evolution settings:")
    print(f"  - Elite count: {evo.elite_count}")
    print(f"  - Mutation chance: {evo.mutation_chance}")
    print(f"  - Mutation amount: {evo.mutation_amount}")
    print("=" * 60 + "\n")


def main(argv: Optional[List[str]] = None):
    """CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Antymology evolving ant colony",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Quick run on a small world
  python -m antymology.main --scenario small --generations 5

  # Longer run with a fitness plot
  python -m antymology.main --generations 50 --output fitness.png
        """
    )

    parser.add_argument(
        "--scenario",
        choices=["small", "standard", "harsh", "fertile"],
        default="standard",
        help="Terrain/colony scenario"
    )
    parser.add_argument("--generations", type=int, default=10, help="Generations to run")
    parser.add_argument("--population-size", type=int, help="Ants per generation")
    parser.add_argument("--generation-duration", type=float, help="Simulated time per generation")
    parser.add_argument("--dt", type=float, help="Tick length")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--output", type=str, help="Save fitness plot (.png) or history (.json)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    config = create_scenario_config(args.scenario)

    # Apply overrides
    if args.population_size is not None:
        config.evolution.population_size = args.population_size
    if args.generation_duration is not None:
        config.evolution.generation_duration = args.generation_duration
    if args.dt is not None:
        config.dt = args.dt
    if args.seed is not None:
        config.seed = args.seed

    try:
        config.validate()
    except ValueError as e:
        parser.error(str(e))

    print_config_summary(config)

    results = run_simulation(config=config, n_generations=args.generations)

    print("\nSimulation complete!")
    print(f"Generations scored: {len(results['history'])}")
    print(f"Best fitness ever: {results['best_fitness_ever']:.1f}")
    for line in results["telemetry"].summary_lines():
        print(f"  {line}")

    if args.output:
        if args.output.endswith(".json"):
            with open(args.output, 'w') as f:
                json.dump([asdict(r) for r in results["history"]], f, indent=2)
            logger.info(f"Saved history to {args.output}")
        else:
            visualize_history(results["history"], args.output)


if __name__ == "__main__":
    main()
