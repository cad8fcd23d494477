from typing import Dict, Optional

from packet import Packet

Queue = Dict[int, Packet]


def first_packet_of_flow(queue: Queue, flow: int) -> Optional[Packet]:
    # The queue keeps arrival order, so the first match is the head of the flow
    for packet in queue.values():
        if packet.flow == flow:
            return packet
    return None


class SchedulingStrategy:
    """Decides which queued packet gets the next bit of the link.

    A strategy is asked once per tick and answers with the id of a packet in
    the queue, or None if the queue is empty. It only updates its own
    scheduling state; the simulator transmits the bit.
    """

    name = "Strategy"

    def __init__(self, number_of_flows: int):
        if number_of_flows < 1:
            raise ValueError(
                f"A strategy needs at least one flow, got {number_of_flows}"
            )
        self.number_of_flows = number_of_flows

    def select_next(self, queue: Queue) -> Optional[int]:
        raise NotImplementedError

    def display_state(self) -> Dict[str, object]:
        return {}

    def __str__(self):
        return self.name


class FIFOStrategy(SchedulingStrategy):
    name = "FIFO"

    def select_next(self, queue: Queue) -> Optional[int]:
        for packet_id in queue:
            return packet_id
        return None


class GPSStrategy(SchedulingStrategy):
    """Serves one bit per flow in turn, skipping flows without queued data."""

    name = "GPS"

    def __init__(self, number_of_flows: int):
        super().__init__(number_of_flows)
        self.current_flow = 0

    def next_flow_with_packet(self, queue: Queue) -> Optional[Packet]:
        # Every scanned flow moves the pointer on, including the one served
        for _ in range(self.number_of_flows):
            packet = first_packet_of_flow(queue, self.current_flow)
            self.current_flow = (self.current_flow + 1) % self.number_of_flows
            if packet is not None:
                return packet
        return None

    def select_next(self, queue: Queue) -> Optional[int]:
        if len(queue) == 0:
            return None
        packet = self.next_flow_with_packet(queue)
        return packet.id if packet is not None else None

    def display_state(self):
        return {"Current flow": self.current_flow}


class RoundRobinStrategy(GPSStrategy):
    """Like GPS, but a flow keeps the link until its head packet is sent."""

    name = "Round robin (RR)"

    def __init__(self, number_of_flows: int):
        super().__init__(number_of_flows)
        self.current_packet_id = None

    def select_next(self, queue: Queue) -> Optional[int]:
        if len(queue) == 0:
            return None
        if self.current_packet_id in queue:
            return self.current_packet_id

        packet = self.next_flow_with_packet(queue)
        self.current_packet_id = packet.id if packet is not None else None
        return self.current_packet_id

    def display_state(self):
        return {
            "Current flow": self.current_flow,
            "Current packet": self.current_packet_id,
        }


class DeficitRoundRobinStrategy(SchedulingStrategy):
    """Deficit round robin with a quantum of one bit per round.

    Each scan over a flow with a queued packet credits the flow one bit; a
    flow that is scanned while empty loses its credit. The head packet is
    picked once the credit covers its remaining size, the credit is charged
    for it, and the packet is then sent without interruption.
    """

    name = "Deficit round robin (DRR)"

    def __init__(self, number_of_flows: int):
        super().__init__(number_of_flows)
        self.current_flow = 0
        self.current_packet_id = None
        self.deficits = [0] * number_of_flows

    def select_next(self, queue: Queue) -> Optional[int]:
        if len(queue) == 0:
            return None
        if self.current_packet_id in queue:
            return self.current_packet_id

        # Terminates: a backlogged flow gains one bit of credit per round
        while True:
            flow = self.current_flow
            packet = first_packet_of_flow(queue, flow)
            if packet is None:
                self.deficits[flow] = 0
            else:
                self.deficits[flow] += 1
                if packet.remaining_size <= self.deficits[flow]:
                    self.deficits[flow] -= packet.remaining_size
                    self.current_packet_id = packet.id
                    return packet.id
            self.current_flow = (self.current_flow + 1) % self.number_of_flows

    def display_state(self):
        return {
            "Current flow": self.current_flow,
            "Current packet": self.current_packet_id,
            "Deficits": list(self.deficits),
        }


STRATEGIES = {
    "fifo": FIFOStrategy,
    "gps": GPSStrategy,
    "rr": RoundRobinStrategy,
    "drr": DeficitRoundRobinStrategy,
}


def create_strategy(key: str, number_of_flows: int) -> SchedulingStrategy:
    if key not in STRATEGIES:
        raise KeyError(
            f"Unknown strategy '{key}', expected one of {', '.join(STRATEGIES)}"
        )
    return STRATEGIES[key](number_of_flows)
