"""Parsing of packet trace documents.

A trace is plain text. Blank lines and lines starting with ``#`` are
ignored. The first remaining line holds the number of flows, every further
line one packet as ``flow size time``.
"""
import re
from pathlib import Path
from typing import List, Optional

from packet import Packet

PACKET_LINE = re.compile(r"^\d+\s\d+\s\d+$", re.ASCII)


class ParseError(ValueError):
    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class ParsedInput:
    def __init__(self, number_of_flows: int, packets: List[Packet]):
        self.number_of_flows = number_of_flows
        self.packets = packets

    def __repr__(self):
        return (
            f"ParsedInput(number_of_flows={self.number_of_flows}, "
            f"packets={len(self.packets)})"
        )


def parse_trace(text: str) -> ParsedInput:
    lines = [
        (line_number, line.strip())
        for line_number, line in enumerate(text.splitlines(), start=1)
    ]
    lines = [(n, line) for n, line in lines if line and not line.startswith("#")]
    if len(lines) == 0:
        raise ParseError("Expected at least one line with data in the input")

    header_line, header = lines[0]
    if not (header.isascii() and header.isdecimal()) or int(header) < 1:
        raise ParseError(
            f"Expected a positive number of flows, found '{header}'", header_line
        )
    number_of_flows = int(header)

    packets = []
    for line_number, line in lines[1:]:
        if not PACKET_LINE.match(line):
            raise ParseError(
                f"Expected 'flow size time' as three integers, found '{line}'",
                line_number,
            )
        flow, size, time = (int(value) for value in line.split())
        if flow >= number_of_flows:
            raise ParseError(
                f"Found flow identifier {flow} >= number of flows {number_of_flows}",
                line_number,
            )
        if size == 0:
            raise ParseError("Packet size must be at least one bit", line_number)
        # Ids follow the order of the packets in the input, starting at 1
        packets.append(Packet(len(packets) + 1, flow, size, time))

    # sort() is stable, so packets arriving together keep their input order
    packets.sort(key=lambda x: x.time)
    return ParsedInput(number_of_flows, packets)


def read_trace(path) -> ParsedInput:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"Trace is not UTF-8 text: {e}") from e
    return parse_trace(text)
