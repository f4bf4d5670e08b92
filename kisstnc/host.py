"""Receiving and interpreting KISS frames sent by a host."""

from __future__ import annotations

import sys
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, TextIO

from .protocol import (
    AX25_MAX_FRAME_LEN,
    FEND,
    KISS_MAX_FRAME_LEN,
    Duplex,
    KissCommand,
    unescape,
)


class KissState(Enum):
    """What the TNC is currently doing."""

    IDLE = 0
    RX_FROM_HOST = 1
    TX_TO_HOST = 2
    RX_FROM_RADIO = 3
    TX_TO_RADIO = 4


@dataclass
class KissConfig:
    """Channel parameters set by host commands; times in milliseconds."""

    tx_delay: int = 500
    persistence: int = 63
    slot_time: int = 100
    tx_tail: int = 0
    duplex: int = Duplex.HALF


class ByteStream:
    """A FIFO of bytes standing in for a serial link."""

    def __init__(self, data: bytes = b"") -> None:
        self._buffer: deque[int] = deque(data)

    def feed(self, data: bytes) -> None:
        """Append incoming bytes."""
        self._buffer.extend(data)

    def available(self) -> int:
        """Number of bytes waiting to be read."""
        return len(self._buffer)

    def read(self) -> int:
        """Take one byte; raise EOFError when nothing is waiting."""
        if not self._buffer:
            raise EOFError("no data available")
        return self._buffer.popleft()


def _hex(byte: int) -> str:
    return format(byte, "X")


@dataclass
class Kiss:
    """KISS TNC host interface: reads frames from a stream and acts on them."""

    kiss_term: ByteStream = field(default_factory=ByteStream)
    log: Optional[TextIO] = None
    on_packet: Optional[Callable[[bytes], None]] = None
    state: KissState = KissState.IDLE
    config: KissConfig = field(default_factory=KissConfig)
    frame_from_host: bytearray = field(default_factory=bytearray)
    ax25_outgoing_packet: bytes = b""

    def _say(self, text: str = "", end: str = "\n") -> None:
        stream = self.log if self.log is not None else sys.stderr
        stream.write(text + end)

    def receive_from_host(self) -> None:
        """Read from the KISS terminal until one frame closes or data runs out."""
        term = self.kiss_term
        if not term.available():
            self.state = KissState.IDLE
            return

        self._say("Receiving KISS message")
        while term.available():
            byte = term.read()
            if byte == FEND:
                if self.state != KissState.RX_FROM_HOST:
                    self.state = KissState.RX_FROM_HOST
                    self.frame_from_host = bytearray((byte,))
                    continue
                self.frame_from_host.append(byte)
                if term.available():
                    self._say("Warning: found chars after closing frame-end")
                if len(self.frame_from_host) >= 3:
                    self._print_kiss_frame()
                    self.parse_kiss_frame()
                else:
                    self._say(f"Error: KISS frame length: {len(self.frame_from_host)}")
                    self._print_kiss_frame()
                self.state = KissState.IDLE
                return
            if (
                self.state == KissState.RX_FROM_HOST
                and len(self.frame_from_host) < KISS_MAX_FRAME_LEN
            ):
                self.frame_from_host.append(byte)
            elif len(self.frame_from_host) >= KISS_MAX_FRAME_LEN:
                self._say("Error:  reached max KISS frame length. Dumping buffer.")
                self.frame_from_host = bytearray()
                self.dump_kiss_term()
                return
        self._print_kiss_frame()

    def _print_kiss_frame(self) -> None:
        if self.frame_from_host:
            self._say("Received KISS frame:")
            self._say("".join(" " + _hex(b) for b in self.frame_from_host))

    def parse_kiss_frame(self) -> Optional[KissCommand]:
        """Dispatch the buffered frame; return the command handled, or None."""
        self._say("Parsing KISS frame")
        frame = self.frame_from_host
        if not frame or frame[0] != FEND:
            first = _hex(frame[0]) if frame else ""
            self._say(
                "Error, expected starting frame-end char: 0xC0, received: " + first
            )
            return None

        type_byte = frame[1] if len(frame) > 1 else 0
        code = KissCommand.RETURN if type_byte == KissCommand.RETURN else type_byte & 0x0F
        handlers = {
            KissCommand.DATA_FRAME: self.extract_ax25_packet,
            KissCommand.TX_DELAY: self._set_tx_delay,
            KissCommand.P: self._set_persistence,
            KissCommand.SLOT_TIME: self._set_slot_time,
            KissCommand.TX_TAIL: self._set_tx_tail,
            KissCommand.FULL_DUPLEX: self._set_full_duplex,
            KissCommand.SET_HARDWARE: self._set_hardware,
            KissCommand.RETURN: self._end_kiss,
        }
        try:
            command = KissCommand(code)
        except ValueError:
            self._say(f"Error, unrecognized KISS cmd: {_hex(code)}")
            self.dump_kiss_term()
            return None
        handlers[command]()
        return command

    def extract_ax25_packet(self) -> bytes:
        """Unescape the frame's payload into the outgoing AX.25 packet."""
        self._say("Extracting AX25 packet from KISS frame")
        payload = bytes(self.frame_from_host[2:-1])
        packet = unescape(payload)[:AX25_MAX_FRAME_LEN]
        self.ax25_outgoing_packet = packet
        self._say("Outgoing AX25 packet:")
        self._say("".join(" " + _hex(b) for b in packet))
        self._say("Sending packet to modulator (not really)")
        if self.on_packet is not None:
            self.on_packet(packet)
        self._say("..done")
        return packet

    def _parameter(self) -> int:
        frame = self.frame_from_host
        return frame[2] if len(frame) > 2 else 0

    def _set_tx_delay(self) -> None:
        self._say("received SET TX DELAY instruction.")
        self.config.tx_delay = 10 * self._parameter()
        self._say(f"Set TX delay to {self.config.tx_delay} ms")

    def _set_persistence(self) -> None:
        self._say("received SET PERSISTENCE instruction.")
        self.config.persistence = self._parameter()
        self._say(f"Set persistence to {self.config.persistence}")

    def _set_slot_time(self) -> None:
        self._say("received SET SLOT TIME instruction.")
        self.config.slot_time = 10 * self._parameter()
        self._say(f"Set slot time to {self.config.slot_time} ms")

    def _set_tx_tail(self) -> None:
        self._say("received SET TX TAIL instruction.")
        self.config.tx_tail = 10 * self._parameter()
        self._say(f"Set TX tail to {self.config.tx_tail} ms")

    def _set_full_duplex(self) -> None:
        self._say("received SET DUPLEX instruction.")
        value = self._parameter()
        self.config.duplex = Duplex.HALF if value == Duplex.HALF else value
        if value == Duplex.HALF:
            self._say("Setting duplex to HALF duplex.")
        else:
            self._say("Setting duplex to FULL duplex.")

    def _set_hardware(self) -> None:
        self._say("received SET HARDWARE instruction (not supported).")

    def _end_kiss(self) -> None:
        self._say("received RETURN instruction.")

    def close_kiss_frame(self) -> bool:
        """Read one byte and report whether it was the closing FEND."""
        try:
            byte = self.kiss_term.read()
        except EOFError:
            self._say("Error: expected closing frame-end char, received nothing")
            return False
        if byte != FEND:
            self._say(f"Error: expected closing frame-end char, received: {_hex(byte)}")
            return False
        return True

    def dump_kiss_term(self) -> None:
        """Drain the KISS terminal into the log and return to idle."""
        self._say("Rest of kiss term buffer:")
        self.echo_from_host_to_log()
        self.state = KissState.IDLE

    def echo_from_host_to_log(self) -> None:
        """Write every waiting byte to the log as hex, tracking frame bounds."""
        term = self.kiss_term
        while term.available():
            byte = term.read()
            if self.state != KissState.RX_FROM_HOST:
                if byte == FEND:
                    self._say(f"New frame: {byte:02X}", end="")
                    self.state = KissState.RX_FROM_HOST
                    self.frame_from_host = bytearray((byte,))
                else:
                    self._say("Error, expected frame to start with 0xC0")
            elif byte != FEND and len(self.frame_from_host) < KISS_MAX_FRAME_LEN:
                self._say(f"{byte:02X} ", end="")
                self.frame_from_host.append(byte)
            else:
                self.state = KissState.IDLE
                self._say(f"{byte:02X} /end frame")