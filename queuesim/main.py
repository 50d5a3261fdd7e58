"""Main entry point for the QueueSim simulator."""

import argparse
import sys
from pathlib import Path

from queuesim.core.simulator import Simulator
from queuesim.reports.report_writer import ReportWriter
from queuesim.utils.io import save_json, save_yaml
from queuesim.utils.logger import setup_logger
from queuesim.utils.visualization import plot_results
from configs import SCENARIO_DIR, load_scenario


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="QueueSim: finite-capacity queueing network simulator"
    )
    parser.add_argument(
        "--config",
        type=str,
        action="append",
        help="Scenario configuration file; repeat to run several scenarios "
             "(default: every file in configs/scenarios)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="results",
        help="Directory to save results",
    )
    parser.add_argument(
        "--format",
        choices=["yaml", "json"],
        default="yaml",
        help="Format of the saved results file",
    )
    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Generate visualization plots",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Main function."""
    args = parse_args(argv)

    # Setup logging
    log_level = "DEBUG" if args.verbose else "INFO"
    logger = setup_logger("QueueSim", level=log_level)
    for component in ("Simulator", "MetricsCollector"):
        setup_logger(component, level=log_level)

    config_paths = args.config or sorted(str(p) for p in SCENARIO_DIR.glob("*.yaml"))
    logger.info("=== QueueSim: finite-capacity queueing simulator ===")

    try:
        output_dir = Path(args.output_dir)
        writer = ReportWriter()
        all_results = []

        # Scenarios run one after another, each with a fresh generator
        for config_path in config_paths:
            logger.info(f"Loading configuration from {config_path}")
            config = load_scenario(config_path)

            simulator = Simulator(config)
            results = simulator.run()
            all_results.append(results)

            logger.info("\n" + writer.generate_report(results))

            for path in writer.save_state_tables(results, output_dir):
                logger.info(f"State table saved to {path}")

            if args.visualize:
                logger.info("Generating visualization plots...")
                plot_results(results, output_dir)

        if len(all_results) > 1:
            table = writer.generate_comparison_table(all_results)
            logger.info("\n" + table.to_string(index=False))

        if args.format == "json":
            results_file = output_dir / "results.json"
            save_json(all_results, str(results_file))
        else:
            results_file = save_yaml(all_results, str(output_dir / "results.yaml"))
        logger.info(f"Results saved to {results_file}")

        logger.info("Simulation completed successfully!")
        return 0

    except Exception as e:
        logger.error(f"Simulation failed: {str(e)}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
