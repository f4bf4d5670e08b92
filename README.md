# kisstnc

Host-side handling of the KISS protocol used between a computer and a
packet-radio TNC (terminal node controller).

The package:

- escapes and unescapes the KISS special bytes (FEND `0xC0`, FESC `0xDB`,
  TFEND `0xDC`, TFESC `0xDD`);
- wraps data in KISS frames;
- reads KISS frames from a byte stream, pulls the AX.25 packet out of data
  frames, and applies the configuration commands (TX delay, persistence,
  slot time, TX tail, duplex).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Framing: `kisstnc.protocol`

- `escape(data)` replaces each FEND with `FESC TFEND` and each FESC with
  `FESC TFESC`.
- `unescape(data)` reverses that; an FESC that is not followed by TFEND or
  TFESC is kept as it is.
- `encode_frame(data)` returns the escaped data between an opening and a
  closing FEND.
- `KissCommand` holds the command codes (`DATA_FRAME`, `TX_DELAY`, `P`,
  `SLOT_TIME`, `TX_TAIL`, `FULL_DUPLEX`, `SET_HARDWARE`, `RETURN`) and
  `Duplex` the duplex modes (`HALF`, `FULL`).

```python
from kisstnc.protocol import encode_frame, escape, unescape

frame = encode_frame(b"\x82\xa6\x40Hello")
assert unescape(escape(b"\xc0\xdb")) == b"\xc0\xdb"
```

## Receiving frames: `kisstnc.host`

A `Kiss` object reads from a `ByteStream`, a FIFO of bytes with `feed()`,
`available()` and `read()`. Feed it the bytes that arrive from the host and
call `receive_from_host()`; it reads until one frame closes or the data runs
out, then acts on the frame:

- a data frame is unescaped (and cut to 2048 bytes) into
  `ax25_outgoing_packet`, and handed to the `on_packet` callback if one was
  given;
- configuration commands update `config`, a `KissConfig` with `tx_delay`,
  `persistence`, `slot_time`, `tx_tail` (milliseconds, defaults 500, 63,
  100, 0) and `duplex`;
- unknown commands are logged and the rest of the stream is dumped to the log.

Everything the object does is written as text to `log` (standard error when
no log is given).

```python
import io
from kisstnc.host import ByteStream, Kiss

stream = ByteStream()
packets = []
kiss = Kiss(stream, log=io.StringIO(), on_packet=packets.append)

stream.feed(b"\xc0\x01\x1e\xc0")   # set TX delay to 30 x 10 ms
kiss.receive_from_host()
print(kiss.config.tx_delay)        # 300

stream.feed(b"\xc0\x00AB\xdb\xdc\xc0")
kiss.receive_from_host()
print(packets[0])                  # b'AB\xc0'
```

## Command line

`kisstnc` reads raw KISS bytes from a file, or from standard input when none
is given (or `-`), runs every frame through the parser and prints the log of
what it did:

```
kisstnc frames.bin
kisstnc < frames.bin
```

The same processing is available as `kisstnc.cli.run(data, log)`, which
returns the `Kiss` object with its final configuration and last packet.

## What it does not do

The package stops at the host side of the link. It does not modulate or
demodulate audio, key a transmitter, or talk to a radio, a serial port or a
Bluetooth link: extracted packets go only to `ax25_outgoing_packet` and the
`on_packet` callback. The `SET_HARDWARE` and `RETURN` commands are logged
and have no other effect.