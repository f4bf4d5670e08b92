import io

import pytest

from kisstnc.host import ByteStream, Kiss, KissConfig, KissState
from kisstnc.protocol import (
    AX25_MAX_FRAME_LEN,
    FEND,
    FESC,
    KISS_MAX_FRAME_LEN,
    Duplex,
    KissCommand,
    escape,
)


def make_frame(command, payload=b""):
    return bytes([FEND, command]) + escape(payload) + bytes([FEND])


def make_kiss(data=b""):
    log = io.StringIO()
    kiss = Kiss(kiss_term=ByteStream(data), log=log)
    return kiss, log


def test_bytestream_fifo():
    stream = ByteStream(b"ab")
    stream.feed(b"c")
    assert stream.available() == 3
    assert [stream.read() for _ in range(3)] == list(b"abc")
    assert stream.available() == 0


def test_bytestream_read_empty_raises():
    with pytest.raises(EOFError):
        ByteStream().read()


def test_default_config_matches_source():
    config = KissConfig()
    assert (config.tx_delay, config.persistence, config.slot_time, config.tx_tail) == (
        500,
        63,
        100,
        0,
    )
    assert config.duplex == Duplex.HALF


def test_receive_with_nothing_available_goes_idle():
    kiss, log = make_kiss()
    kiss.state = KissState.RX_FROM_HOST
    kiss.receive_from_host()
    assert kiss.state is KissState.IDLE
    assert log.getvalue() == ""


def test_data_frame_extracts_packet():
    payload = b"\x82\xa6\x40\x61\xe0\x03\xf0Hello"
    kiss, log = make_kiss(make_frame(KissCommand.DATA_FRAME, payload))
    kiss.receive_from_host()
    assert kiss.ax25_outgoing_packet == payload
    assert kiss.state is KissState.IDLE
    assert "Outgoing AX25 packet:" in log.getvalue()


def test_data_frame_with_escaped_bytes():
    payload = bytes([1, FEND, 2, FESC, 3])
    kiss, _ = make_kiss(make_frame(KissCommand.DATA_FRAME, payload))
    kiss.receive_from_host()
    assert kiss.ax25_outgoing_packet == payload


def test_on_packet_callback_receives_packet():
    received = []
    payload = b"packet"
    kiss = Kiss(
        kiss_term=ByteStream(make_frame(0, payload)),
        log=io.StringIO(),
        on_packet=received.append,
    )
    kiss.receive_from_host()
    assert received == [payload]


def test_frame_split_across_feeds():
    frame = make_frame(0, b"split")
    kiss, _ = make_kiss(frame[:4])
    kiss.receive_from_host()
    assert kiss.state is KissState.RX_FROM_HOST
    kiss.kiss_term.feed(frame[4:])
    kiss.receive_from_host()
    assert kiss.ax25_outgoing_packet == b"split"
    assert kiss.state is KissState.IDLE


@pytest.mark.parametrize("value", [0, 7, 255])
def test_persistence(value):
    kiss, log = make_kiss(bytes([FEND, KissCommand.P, value, FEND]))
    kiss.receive_from_host()
    assert kiss.config.persistence == value
    assert f"Set persistence to {value}" in log.getvalue()


@pytest.mark.parametrize(
    "command, attribute",
    [
        (KissCommand.TX_DELAY, "tx_delay"),
        (KissCommand.SLOT_TIME, "slot_time"),
        (KissCommand.TX_TAIL, "tx_tail"),
    ],
)
def test_timing_commands_use_ten_ms_units(command, attribute):
    value = 25
    kiss, _ = make_kiss(bytes([FEND, command, value, FEND]))
    kiss.receive_from_host()
    assert getattr(kiss.config, attribute) == 10 * value


def test_full_duplex():
    kiss, log = make_kiss(bytes([FEND, KissCommand.FULL_DUPLEX, 1, FEND]))
    kiss.receive_from_host()
    assert kiss.config.duplex == Duplex.FULL
    assert "Setting duplex to FULL duplex." in log.getvalue()


def test_half_duplex():
    kiss, log = make_kiss(bytes([FEND, KissCommand.FULL_DUPLEX, 0, FEND]))
    kiss.config.duplex = Duplex.FULL
    kiss.receive_from_host()
    assert kiss.config.duplex == Duplex.HALF
    assert "Setting duplex to HALF duplex." in log.getvalue()


def test_port_nibble_is_ignored():
    kiss, _ = make_kiss(bytes([FEND, 0x10 | KissCommand.P, 9, FEND]))
    kiss.receive_from_host()
    assert kiss.config.persistence == 9


def test_return_command():
    kiss, log = make_kiss(bytes([FEND, KissCommand.RETURN, FEND]))
    kiss.receive_from_host()
    assert "received RETURN instruction." in log.getvalue()


def test_parse_returns_command():
    kiss, _ = make_kiss()
    kiss.frame_from_host = bytearray([FEND, KissCommand.SET_HARDWARE, 0, FEND])
    assert kiss.parse_kiss_frame() is KissCommand.SET_HARDWARE


def test_unknown_command():
    kiss, log = make_kiss()
    kiss.frame_from_host = bytearray([FEND, 0x07, 0, FEND])
    assert kiss.parse_kiss_frame() is None
    assert "Error, unrecognized KISS cmd: 7" in log.getvalue()
    assert kiss.state is KissState.IDLE


def test_parse_rejects_missing_fend():
    kiss, log = make_kiss()
    kiss.frame_from_host = bytearray([0x01, 0x00, 0x02])
    assert kiss.parse_kiss_frame() is None
    assert "expected starting frame-end char" in log.getvalue()


def test_short_frame_reports_error():
    kiss, log = make_kiss(bytes([FEND, FEND]))
    kiss.receive_from_host()
    assert "Error: KISS frame length: 2" in log.getvalue()
    assert kiss.ax25_outgoing_packet == b""
    assert kiss.state is KissState.IDLE


def test_trailing_data_warning():
    kiss, log = make_kiss(make_frame(0, b"a") + b"zz")
    kiss.receive_from_host()
    assert "Warning: found chars after closing frame-end" in log.getvalue()
    assert kiss.kiss_term.available() == 2


def test_overlong_frame_is_dumped():
    data = bytes([FEND]) + bytes([0x41]) * (KISS_MAX_FRAME_LEN + 5)
    kiss, log = make_kiss(data)
    kiss.receive_from_host()
    assert "reached max KISS frame length" in log.getvalue()
    assert kiss.kiss_term.available() == 0
    assert kiss.state is KissState.IDLE


def test_extracted_packet_never_exceeds_limit():
    kiss, _ = make_kiss()
    kiss.frame_from_host = bytearray([FEND, 0]) + bytearray(KISS_MAX_FRAME_LEN) + bytearray([FEND])
    packet = kiss.extract_ax25_packet()
    assert len(packet) == AX25_MAX_FRAME_LEN


def test_close_kiss_frame():
    kiss, log = make_kiss(bytes([FEND, 0x41]))
    assert kiss.close_kiss_frame() is True
    assert kiss.close_kiss_frame() is False
    assert "expected closing frame-end char, received: 41" in log.getvalue()
    assert kiss.close_kiss_frame() is False


def test_echo_rejects_data_outside_frame():
    kiss, log = make_kiss(b"\x41")
    kiss.echo_from_host_to_log()
    assert "Error, expected frame to start with 0xC0" in log.getvalue()
    assert kiss.state is KissState.IDLE


def test_dump_echoes_frame_and_goes_idle():
    kiss, log = make_kiss(bytes([FEND, 0x41, FEND]))
    kiss.dump_kiss_term()
    text = log.getvalue()
    assert text.startswith("Rest of kiss term buffer:")
    assert "New frame: C0" in text
    assert "/end frame" in text
    assert kiss.state is KissState.IDLE
    assert kiss.kiss_term.available() == 0