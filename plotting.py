from pathlib import Path

import matplotlib.pyplot as plt

COLORS = [
    "lightblue",
    "lightgreen",
    "lightyellow",
    "plum",
    "lightcyan",
    "lightgray",
    "lightpink",
]


def plot_boxplots(raw_results, trace, output_folder) -> Path:
    delays = {
        strategy: data["packet_delays_per_flow"]
        for strategy, data in raw_results[trace].items()
    }
    flows = sorted({flow for per_flow in delays.values() for flow in per_flow})
    nflows = len(flows)
    colors = [COLORS[i % len(COLORS)] for i in range(nflows)]

    fig, ax = plt.subplots()

    group_centers = []
    for n, per_flow in enumerate(delays.values()):
        start = n * (nflows + 1)
        group_flows = [flow for flow in flows if flow in per_flow]
        bp = ax.boxplot(
            [per_flow[flow] for flow in group_flows],
            positions=[start + flows.index(flow) for flow in group_flows],
            widths=0.6,
            patch_artist=True,
        )
        for patch, flow in zip(bp["boxes"], group_flows):
            patch.set_facecolor(colors[flows.index(flow)])
        group_centers.append(start + (nflows - 1) / 2)

    # Create a custom legend
    legend_handles = [plt.Line2D([0], [0], color=color, lw=4) for color in colors]
    ax.legend(legend_handles, [f"Flow {flow}" for flow in flows], title="Flows")

    ax.set_xticks(group_centers)
    ax.set_xticklabels(list(delays.keys()))

    ax.set_ylabel("Delay in ticks")

    fig.tight_layout()
    output_folder = Path(output_folder)
    output_folder.mkdir(parents=True, exist_ok=True)
    path = output_folder / f"boxplot-{trace}.png"
    fig.savefig(path)
    plt.close(fig)
    return path


def generate_latex_tables(results, path):
    indent = "                     "
    with open(path, "w") as f:
        for trace, data in results.items():
            flows = sorted(
                {
                    flow
                    for strategy_results in data.values()
                    for flow in strategy_results["throughput_per_flow"]
                },
                key=int,
            )
            f.write(f"Trace: {trace}\n")
            f.write("\\begin{tabular}{ll|" + "l" * len(flows) + "|}\n")
            f.write(
                indent
                + "& & "
                + " & ".join(f"Flow {flow}" for flow in flows)
                + " \\\\\n"
            )
            f.write(indent + "\\hline\n")
            for strategy, strategy_results in data.items():
                # One row per metric, one column per flow; "-" if a flow sent nothing
                rows = [
                    ("Throughput", "throughput_per_flow", lambda t: str(round(t, 4))),
                    ("Avg. Delay", "average_delay_per_flow", lambda t: str(int(round(t)))),
                    ("Std. Dev.", "standard_deviation_per_flow", lambda t: str(int(round(t)))),
                ]
                f.write(("\\multirow{3}{*}{" + strategy + "} ").ljust(21))
                for n, (label, key, fmt) in enumerate(rows):
                    values = strategy_results[key]
                    f.write(
                        ("" if n == 0 else indent)
                        + f"& {label} & "
                        + " & ".join(
                            fmt(values[flow]) if flow in values else "-"
                            for flow in flows
                        )
                        + " \\\\\n"
                    )
                f.write(indent + "\\hline\n")
            f.write("\\end{tabular}\n")
            f.write("\n")
