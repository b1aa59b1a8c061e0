#!/usr/bin/env python3
"""
Simple script to run network formation experiments from config file.
"""

import argparse
import logging

from network_of_infections.config.config_manager import ConfigManager
from network_of_infections.core.exceptions import ConfigurationError
from network_of_infections.runner import Runner


def main():
    parser = argparse.ArgumentParser(description="Run network formation and disease spread experiments from config file")
    parser.add_argument("--config", required=True, help="Configuration file path")
    parser.add_argument("--output-dir", default=None, help="Output directory (overrides output_directory in config)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    logger = logging.getLogger(__name__)

    # Load config
    try:
        config = ConfigManager(args.config)
    except FileNotFoundError:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
        logger.error(f"Config file {args.config} not found!")
        return 1
    except ConfigurationError as e:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
        logger.error(f"Invalid config file: {e}")
        return 1

    # Setup logging
    level = logging.DEBUG if args.verbose else getattr(logging, config.get_logging_level(), logging.INFO)
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(message)s')

    sim_params = config.get_simulation_params()
    logger.info("Starting network formation experiment")
    logger.info("=" * 50)
    logger.info(f"Config: {args.config}")
    logger.info(f"Agents: {sim_params['n_agents']}")
    logger.info(f"Utility: {config.get_utility_params()['type']}")
    logger.info(f"Disease: {config.get_disease_params()}")

    try:
        runner = Runner(config, args.output_dir)
        results, experiment_path = runner.run_experiment()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    outcome = results['result']
    logger.info(f"Finished after {outcome['total_rounds']} rounds ({outcome['reason']}, stable={outcome['stable']})")
    logger.info(f"Results saved to: {experiment_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
