import matplotlib

matplotlib.use("Agg")

import pytest

from simulator import QueueingSimulator
from strategies import create_strategy
from trace_parser import parse_trace


@pytest.fixture
def simulate():
    def run(trace, strategy_key):
        parsed = parse_trace(trace)
        simulator = QueueingSimulator(
            parsed, create_strategy(strategy_key, parsed.number_of_flows)
        )
        simulator.run()
        return simulator

    return run
