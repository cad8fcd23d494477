import copy
import logging
from collections import deque
from types import MappingProxyType
from typing import Dict, List, Mapping, NamedTuple, Tuple

from metrics import (
    LatencyReport,
    Throughput,
    compute_latency_stats,
    compute_throughput,
)
from packet import Packet
from strategies import SchedulingStrategy
from trace_parser import ParsedInput

logger = logging.getLogger(__name__)


class SimulationState(NamedTuple):
    current_time: int
    number_of_flows: int
    pending: Tuple[Packet, ...]
    active: Mapping[int, Packet]
    completed: Tuple[Packet, ...]
    finished: bool
    strategy_state: Dict[str, object]


class QueueingSimulator:
    """Shares one link, one bit per tick, between the flows of a trace.

    Packets wait in ``pending`` until their arrival time, are then queued in
    ``active`` (ordered by arrival) and move to ``completed`` once their last
    bit is sent. Which packet is served each tick is up to the strategy.
    """

    def __init__(self, parsed: ParsedInput, strategy: SchedulingStrategy):
        self.number_of_flows = parsed.number_of_flows
        self.strategy = strategy
        self.pending = deque(copy.deepcopy(parsed.packets))
        self.active: Dict[int, Packet] = {}
        self.completed: List[Packet] = []
        self.time = 0

    @property
    def finished(self) -> bool:
        return len(self.pending) == 0 and len(self.active) == 0

    @property
    def strategy_state(self) -> Dict[str, object]:
        return copy.deepcopy(self.strategy.display_state())

    def enqueue_packets(self):
        # Enqueue packets arriving at the current time, pending is sorted by time
        while len(self.pending) > 0 and self.pending[0].time <= self.time:
            packet = self.pending.popleft()
            self.active[packet.id] = packet

    def finish_packet(self, packet: Packet):
        del self.active[packet.id]
        packet.completion_time = self.time
        self.completed.append(packet)
        logger.debug(
            "Packet %d of flow %d sent at %d", packet.id, packet.flow, self.time
        )

    def step(self):
        if self.finished:
            logger.warning("Tried to step but the simulation is finished")
            return

        self.enqueue_packets()

        packet_id = self.strategy.select_next(self.active)
        if packet_id is not None:
            packet = self.active.get(packet_id)
            if packet is None:
                logger.error(
                    "%s selected packet %s which is not in the queue",
                    self.strategy,
                    packet_id,
                )
            else:
                packet.remaining_size -= 1
                if packet.remaining_size == 0:
                    self.finish_packet(packet)

        self.time += 1

    def run(self) -> int:
        start = self.time
        while not self.finished:
            self.step()
        return self.time - start

    def snapshot(self) -> SimulationState:
        return SimulationState(
            current_time=self.time,
            number_of_flows=self.number_of_flows,
            pending=tuple(copy.deepcopy(list(self.pending))),
            active=MappingProxyType(copy.deepcopy(self.active)),
            completed=tuple(copy.deepcopy(self.completed)),
            finished=self.finished,
            strategy_state=self.strategy_state,
        )

    def throughput(self) -> Throughput:
        return compute_throughput(self.completed, self.time)

    def latency_stats(self) -> LatencyReport:
        return compute_latency_stats(self.completed)

    def __repr__(self):
        return (
            f"QueueingSimulator(strategy={self.strategy}, time={self.time}, "
            f"pending={len(self.pending)}, active={len(self.active)}, "
            f"completed={len(self.completed)})"
        )
