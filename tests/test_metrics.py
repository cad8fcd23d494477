import pytest

from metrics import (
    LatencyStats,
    compute_latency_stats,
    compute_throughput,
    packet_delays_per_flow,
)
from packet import Packet


def sent(packet_id, flow, size, time, completion_time):
    packet = Packet(packet_id, flow, size, time)
    packet.remaining_size = 0
    packet.completion_time = completion_time
    return packet


def test_throughput_per_flow_and_total(simulate):
    throughput = simulate("2\n0 3 0\n1 2 0\n", "fifo").throughput()

    assert throughput.total == pytest.approx(1.0)
    assert throughput.per_flow == pytest.approx({0: 0.6, 1: 0.4})
    assert throughput.sent_bits == 5
    assert throughput.sent_bits_per_flow == {0: 3, 1: 2}


def test_throughput_without_time_or_packets():
    assert compute_throughput([], 10).total == 0
    assert compute_throughput([], 10).per_flow == {}
    assert compute_throughput([sent(1, 0, 4, 0, 3)], 0).per_flow == {}


def test_throughput_counts_only_completed_flows():
    completed = [sent(1, 2, 4, 0, 3), sent(2, 2, 6, 1, 9)]

    throughput = compute_throughput(completed, 20)

    assert throughput.per_flow == {2: 0.5}
    assert throughput.total == 0.5


def test_latency_stats(simulate):
    report = simulate("2\n0 3 0\n1 2 0\n", "fifo").latency_stats()

    assert report.total == LatencyStats(pytest.approx(3.0), pytest.approx(1.0))
    assert report.per_flow == {0: LatencyStats(2.0, 0.0), 1: LatencyStats(4.0, 0.0)}


def test_total_latency_is_not_a_mean_of_flow_means():
    completed = [
        sent(1, 0, 1, 0, 1),
        sent(2, 0, 1, 0, 3),
        sent(3, 0, 1, 0, 5),
        sent(4, 1, 1, 0, 9),
    ]

    report = compute_latency_stats(completed)

    assert report.per_flow[0].mean == pytest.approx(3.0)
    assert report.per_flow[0].variance == pytest.approx(8 / 3)
    assert report.per_flow[1] == LatencyStats(9.0, 0.0)
    assert report.total.mean == pytest.approx(4.5)
    assert report.total.variance == pytest.approx(8.75)


def test_latency_stats_without_packets():
    report = compute_latency_stats([])

    assert report.total == LatencyStats(0, 0)
    assert report.per_flow == {}


def test_reports_are_repeatable(simulate):
    simulator = simulate("3\n0 3 0\n1 2 1\n2 5 1\n0 1 4\n", "drr")

    assert simulator.throughput() == simulator.throughput()
    assert simulator.latency_stats() == simulator.latency_stats()


def test_packet_delays_per_flow_sorted_by_flow():
    completed = [sent(1, 1, 2, 0, 4), sent(2, 0, 1, 2, 5), sent(3, 1, 1, 1, 6)]

    assert packet_delays_per_flow(completed) == {0: [3], 1: [4, 5]}
