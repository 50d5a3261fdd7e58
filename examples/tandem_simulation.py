"""Two-stage tandem example with a downstream capacity sweep."""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from queuesim.core.simulator import Simulator
from queuesim.reports.report_writer import ReportWriter
from queuesim.utils.logger import setup_logger
from configs import SCENARIO_DIR, load_scenario


def main():
    """Grow stage 2's waiting room and watch its losses fall."""
    logger = setup_logger("TandemSimulation")
    base_config = load_scenario(str(SCENARIO_DIR / "tandem.yaml"))
    writer = ReportWriter()

    all_results = []
    for capacity in (2, 3, 5, 8):
        config = dict(base_config)
        config['name'] = f"tandem K2={capacity}"
        config['stages'] = [dict(s) for s in base_config['stages']]
        config['stages'][1]['capacity'] = capacity

        all_results.append(Simulator(config).run())

    table = writer.generate_comparison_table(all_results)
    logger.info("\n" + table[table['stage'] == 'stage2'].to_string(index=False))


if __name__ == "__main__":
    main()
