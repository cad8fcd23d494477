class Packet:
    def __init__(self, id, flow, size, time):
        self.id = id
        self.flow = flow
        self.size = size
        self.remaining_size = size
        self.time = time
        self.completion_time = None
        # Free slot for strategies that need to annotate packets
        self.meta = None

    @property
    def latency(self):
        if self.completion_time is None:
            return None
        return self.completion_time - self.time

    def __repr__(self):
        return (
            f"Packet(id={self.id}, flow={self.flow}, size={self.size}, "
            f"remaining_size={self.remaining_size}, time={self.time})"
        )
