# picogps

Read NMEA 0183 sentences from a GPS receiver on a serial port and decode
them into position, time, fix and satellite information.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

```
picogps PORT [--display-interval SECONDS] [--poll-interval SECONDS]
```

`PORT` is a serial device or any pyserial URL, such as `loop://`. The port
is opened at 115200 baud, 8N1, without flow control, and a short greeting
line is written to it.

The command collects whole sentences that start with `$` and end at a
carriage return or line feed. Every `--poll-interval` seconds (default
0.01) it checks for a finished sentence, prints it with the receiver's
counters, decodes it, and writes the greeting again so that a looped-back
port keeps the cycle going. Every `--display-interval` seconds (default 10)
it prints the current fix in this form:

```
GPS Fix: 1, Lat: 48.117300 N, Lon: 11.516667 E, Alt: 545.40 m, Speed: 0.00 knots
```

Sentences that fail decoding are reported and skipped. The command runs
until interrupted and exits with status 1 if the serial port cannot be
used.

## Decoding sentences

```python
from picogps.gps import GpsData, NmeaError

gps = GpsData()
try:
    gps.update("$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47")
except NmeaError as err:
    print("rejected:", err)

print(gps.latitude, gps.longitude, gps.fix_quality, gps.has_fix)
```

`GpsData.update` checks that the sentence starts with `$`, is at least 6
and fewer than 160 characters long, and carries a correct `*hh` XOR
checksum. It then picks a decoder by the first three characters of the
sentence tag:

| Tag prefix | Decoded as | Fields set |
|------------|-----------|------------|
| `GPG`      | GGA       | time, latitude/longitude and their directions, fix quality, satellites, HDOP, altitude, geoid height, `has_fix` |
| `GNR`      | RMC       | time, latitude/longitude, speed, track angle, date, `has_fix` |
| `GNG`      | GLL       | latitude/longitude, time, `has_fix` |
| `GLG`      | GSA       | 3D fix type, PDOP, HDOP, VDOP, `has_3d_fix` |

Because the prefix alone decides, a `$GPGSV` sentence is decoded with the
GGA layout. Any other prefix, and any failed check above, raises
`NmeaError` (a `ValueError`). Fields that a sentence does not carry keep
their previous values, so one `GpsData` accumulates state across sentences.

The helpers in `picogps.gps` can also be used on their own:

- `nmea_to_decimal(value, direction)` turns `dddmm.mmmm` into signed
  decimal degrees (negative for `S` and `W`).
- `checksum_ok(sentence)` checks the checksum between `$` and `*`.
- `split_fields(body, max_fields)` splits a sentence body on commas.

## Assembling sentences from a byte stream

```python
from picogps.gps import GpsData
from picogps.receiver import ReceiverState, SentenceReceiver, open_port

gps = GpsData()
receiver = SentenceReceiver()
with open_port("/dev/ttyUSB0", 115200) as port:
    receiver.feed(port.read(port.in_waiting or 1))
    if receiver.state is ReceiverState.READY:
        gps.update(receiver.sentence())
        receiver.acknowledge()
```

`SentenceReceiver.feed` ignores bytes until it sees `$`, stores characters
up to the end of the line, then holds the finished sentence until
`acknowledge()` is called. Its `state` is a `ReceiverState`: `IDLE`,
`STORING` or `READY`. Zero bytes are counted in `zeros_rxed` and dropped,
line endings are counted in `lfcr_rxed`, and a sentence that grows past
the buffer is discarded. The first 1600 raw bytes received are kept in
`debug`.

`picogps.app` offers `format_fix(gps)`, `process_pending(receiver, gps,
port)` and `run(port, display_interval, poll_interval)` for building a
polling loop of your own.

## What it does not do

picogps only reads and decodes. It does not configure the GPS receiver,
list individual satellites, log or store positions, or serve them to
other programs.