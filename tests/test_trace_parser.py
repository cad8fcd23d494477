import pytest

from trace_parser import ParseError, parse_trace, read_trace


def test_packets_are_sorted_by_arrival_time():
    parsed = parse_trace("2\n0 4 5\n1 3 2\n")

    assert parsed.number_of_flows == 2
    assert [(p.id, p.flow, p.size, p.time) for p in parsed.packets] == [
        (2, 1, 3, 2),
        (1, 0, 4, 5),
    ]


def test_simultaneous_arrivals_keep_input_order():
    parsed = parse_trace("3\n2 1 4\n0 1 4\n1 1 0\n")

    assert [p.id for p in parsed.packets] == [3, 1, 2]


def test_comments_and_blank_lines_are_ignored():
    parsed = parse_trace("# flows\n\n2\n   \n# flow size time\n1 7 0\n")

    assert parsed.number_of_flows == 2
    assert len(parsed.packets) == 1
    packet = parsed.packets[0]
    assert packet.id == 1
    assert packet.remaining_size == 7
    assert packet.completion_time is None


def test_header_only_gives_no_packets():
    parsed = parse_trace("4\n")

    assert parsed.number_of_flows == 4
    assert parsed.packets == []


@pytest.mark.parametrize("text", ["", "\n\n", "# only a comment\n"])
def test_empty_input_is_rejected(text):
    with pytest.raises(ParseError) as e:
        parse_trace(text)
    assert e.value.line_number is None


@pytest.mark.parametrize("header", ["0", "-1", "two", "1.5"])
def test_invalid_number_of_flows(header):
    with pytest.raises(ParseError) as e:
        parse_trace(f"{header}\n0 1 0\n")
    assert e.value.line_number == 1


@pytest.mark.parametrize("line", ["0 1", "0 1 2 3", "a 1 2", "0 -1 2", "0\t1\t2x"])
def test_malformed_packet_line_reports_line_number(line):
    with pytest.raises(ParseError) as e:
        parse_trace(f"2\n0 1 0\n{line}\n")
    assert e.value.line_number == 3
    assert str(e.value).startswith("Line 3:")


def test_flow_id_out_of_range():
    with pytest.raises(ParseError, match="flow identifier 2"):
        parse_trace("# header\n2\n0 1 0\n2 1 0\n")


def test_zero_size_packet_is_rejected():
    with pytest.raises(ParseError, match="Line 2"):
        parse_trace("1\n0 0 3\n")


def test_read_trace(tmp_path):
    path = tmp_path / "trace.txt"
    path.write_text("1\n0 3 1\n", encoding="utf-8")

    parsed = read_trace(path)

    assert parsed.number_of_flows == 1
    assert parsed.packets[0].size == 3


@pytest.mark.parametrize("text", ["1\n0 ٣ 0\n", "1\n٠ 1 0\n", "1\n0\u00a01 0\n"])
def test_packet_line_must_be_ascii(text):
    with pytest.raises(ParseError, match="Line 2"):
        parse_trace(text)


def test_number_of_flows_must_be_ascii():
    with pytest.raises(ParseError, match="Line 1"):
        parse_trace("٢\n0 1 0\n")


def test_non_utf8_file_is_a_parse_error(tmp_path):
    path = tmp_path / "junk.bin"
    path.write_bytes(b"\xff\xfe\x00bad")

    with pytest.raises(ParseError, match="UTF-8"):
        read_trace(path)
