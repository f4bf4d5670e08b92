"""KISS framing constants, commands and byte escaping."""

from __future__ import annotations

from enum import IntEnum

AX25_MAX_FRAME_LEN = 2048
KISS_MAX_FRAME_LEN = 2051

FEND = 0xC0
FESC = 0xDB
TFEND = 0xDC
TFESC = 0xDD

_ESCAPES = {FEND: bytes((FESC, TFEND)), FESC: bytes((FESC, TFESC))}
_UNESCAPES = {TFEND: FEND, TFESC: FESC}


class KissCommand(IntEnum):
    """Command codes carried in the low nibble of a frame's type byte."""

    DATA_FRAME = 0x00
    TX_DELAY = 0x01
    P = 0x02
    SLOT_TIME = 0x03
    TX_TAIL = 0x04
    FULL_DUPLEX = 0x05
    SET_HARDWARE = 0x06
    RETURN = 0xFF


class Duplex(IntEnum):
    """Duplex modes of the radio channel."""

    HALF = 0
    FULL = 1


def escape(data: bytes) -> bytes:
    """Replace FEND and FESC bytes with their two-byte escape sequences."""
    out = bytearray()
    for byte in data:
        out += _ESCAPES.get(byte, bytes((byte,)))
    return bytes(out)


def unescape(data: bytes) -> bytes:
    """Undo KISS escaping; an FESC not followed by TFEND or TFESC is kept."""
    out = bytearray()
    pending_escape = False
    for byte in data:
        if pending_escape:
            pending_escape = False
            if byte in _UNESCAPES:
                out.append(_UNESCAPES[byte])
                continue
            out.append(FESC)
        if byte == FESC:
            pending_escape = True
        else:
            out.append(byte)
    if pending_escape:
        out.append(FESC)
    return bytes(out)


def encode_frame(data: bytes) -> bytes:
    """Wrap escaped data between opening and closing FEND bytes."""
    return bytes((FEND,)) + escape(data) + bytes((FEND,))