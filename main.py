import argparse
import json
import logging
from pathlib import Path

import numpy as np

from metrics import packet_delays_per_flow
from plotting import generate_latex_tables, plot_boxplots
from simulator import QueueingSimulator
from strategies import STRATEGIES, create_strategy
from trace_parser import ParseError, read_trace

LOG_FMT = "%(levelname)s - %(message)s"
DEFAULT_TRACES_FOLDER = "traces"
DEFAULT_OUTPUT = "results.json"

logger = logging.getLogger(__name__)


def simulate_trace(parsed, strategy_keys):
    results = {}
    raw_results = {}
    for key in strategy_keys:
        simulator = QueueingSimulator(parsed, create_strategy(key, parsed.number_of_flows))
        ticks = simulator.run()
        logger.info("%s finished after %d ticks", simulator.strategy, ticks)

        delays = packet_delays_per_flow(simulator.snapshot().completed)
        throughput = simulator.throughput()
        latency = simulator.latency_stats()
        raw_results[str(simulator.strategy)] = {
            "packet_delays_per_flow": delays,
        }
        results[str(simulator.strategy)] = {
            "time": simulator.time,
            "sent_bits_per_flow": throughput.sent_bits_per_flow,
            "throughput": throughput.total,
            "throughput_per_flow": throughput.per_flow,
            "average_delay": latency.total.mean,
            "delay_variance": latency.total.variance,
            "average_delay_per_flow": {
                flow: stats.mean for flow, stats in latency.per_flow.items()
            },
            "delay_variance_per_flow": {
                flow: stats.variance for flow, stats in latency.per_flow.items()
            },
            "standard_deviation_per_flow": {
                flow: float(np.std(flow_delays)) for flow, flow_delays in delays.items()
            },
        }
    return results, raw_results


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Compare link scheduling strategies on packet traces"
    )
    parser.add_argument("traces", nargs="?", default=DEFAULT_TRACES_FOLDER)
    parser.add_argument(
        "--strategy",
        action="append",
        choices=list(STRATEGIES),
        help="strategy to simulate, may be repeated (default: all)",
    )
    parser.add_argument("--output", default=DEFAULT_OUTPUT)
    parser.add_argument("--tables", help="write LaTeX tables to this file")
    parser.add_argument("--plots", help="write delay boxplots into this folder")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format=LOG_FMT)
    strategy_keys = args.strategy or list(STRATEGIES)

    results = {}
    raw_results = {}
    traces = Path(args.traces)
    if not traces.is_dir():
        logger.error("Traces folder %s does not exist", traces)
        return 2

    failed = False
    for trace_file in sorted(traces.iterdir()):
        if not trace_file.is_file():
            continue
        try:
            parsed = read_trace(trace_file)
        except (ParseError, OSError) as e:
            logger.error("Skipping %s: %s", trace_file.name, e)
            failed = True
            continue

        logger.info(
            "Simulating %s (%d flows, %d packets)",
            trace_file.name,
            parsed.number_of_flows,
            len(parsed.packets),
        )
        results[trace_file.name], raw_results[trace_file.name] = simulate_trace(
            parsed, strategy_keys
        )

    with open(args.output, "w") as f:
        f.write(json.dumps(results, indent=4))

    if args.tables:
        generate_latex_tables(results, args.tables)

    if args.plots:
        for trace, data in raw_results.items():
            if not any(d["packet_delays_per_flow"] for d in data.values()):
                continue
            plot_boxplots(raw_results, trace, args.plots)

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
