"""Throughput and latency reports over the packets a simulation has sent.

All functions only read the packets they are given and can be called any
number of times on the same log.
"""
from typing import Dict, Iterable, List, NamedTuple

import numpy as np

from packet import Packet


class Throughput(NamedTuple):
    total: float
    per_flow: Dict[int, float]
    sent_bits: int
    sent_bits_per_flow: Dict[int, int]


class LatencyStats(NamedTuple):
    mean: float
    variance: float


class LatencyReport(NamedTuple):
    total: LatencyStats
    per_flow: Dict[int, LatencyStats]


def sent_bits_per_flow(completed: Iterable[Packet]) -> Dict[int, int]:
    sent_bits = {}
    for packet in completed:
        sent_bits[packet.flow] = sent_bits.get(packet.flow, 0) + packet.size
    return dict(sorted(sent_bits.items()))


def packet_delays_per_flow(completed: Iterable[Packet]) -> Dict[int, List[int]]:
    delays = {}
    for packet in completed:
        delays.setdefault(packet.flow, []).append(packet.latency)
    return dict(sorted(delays.items()))


def compute_throughput(completed: Iterable[Packet], time: int) -> Throughput:
    sent_bits = sent_bits_per_flow(completed)
    total_bits = sum(sent_bits.values())
    if time == 0 or total_bits == 0:
        return Throughput(0, {}, total_bits, sent_bits)

    return Throughput(
        total=total_bits / time,
        per_flow={flow: bits / time for flow, bits in sent_bits.items()},
        sent_bits=total_bits,
        sent_bits_per_flow=sent_bits,
    )


def latency_stats(delays) -> LatencyStats:
    # Population variance, as np.var computes by default
    return LatencyStats(float(np.mean(delays)), float(np.var(delays)))


def compute_latency_stats(completed: Iterable[Packet]) -> LatencyReport:
    delays = packet_delays_per_flow(completed)
    if len(delays) == 0:
        return LatencyReport(LatencyStats(0, 0), {})

    all_delays = [delay for flow_delays in delays.values() for delay in flow_delays]
    return LatencyReport(
        total=latency_stats(all_delays),
        per_flow={
            flow: latency_stats(flow_delays) for flow, flow_delays in delays.items()
        },
    )
