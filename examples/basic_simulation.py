"""Basic simulation example: the G/G/1/5 and G/G/2/5 scenarios side by side."""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from queuesim.core.simulator import Simulator
from queuesim.reports.report_writer import ReportWriter
from queuesim.utils.logger import setup_logger
from configs import DEFAULT_CONFIG_PATH, load_config, merge_configs


def main():
    """Run a single stage with one and then two servers."""
    logger = setup_logger("BasicSimulation")

    logger.info("=== Basic G/G/c/5 Simulation ===")

    base_config = load_config(str(DEFAULT_CONFIG_PATH))
    writer = ReportWriter()

    for servers in (1, 2):
        # Customize for this example
        config = merge_configs(base_config, {
            'name': f"G/G/{servers}/5",
            'stages': [{
                'name': 'queue',
                'servers': servers,
                'capacity': 5,
                'arrival_range': [2.0, 5.0],
                'service_range': [3.0, 5.0],
            }],
        })

        # Each run builds its own generator from the same seed
        results = Simulator(config).run()
        logger.info("\n" + writer.generate_report(results))

    logger.info("\nSimulation complete!")


if __name__ == "__main__":
    main()
