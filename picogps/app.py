"""Command-line loop that reads NMEA sentences from a serial port and reports the fix."""

from __future__ import annotations

import argparse
import sys
import time
from typing import Optional, Sequence

import serial

from picogps.gps import GpsData, NmeaError
from picogps.receiver import GREETING, ReceiverState, SentenceReceiver, open_port

DISPLAY_INTERVAL = 10.0
POLL_INTERVAL = 0.01
_IDLE_SLEEP = 0.001


def format_fix(gps: GpsData) -> str:
    """Render the fix summary line for ``gps``."""
    return (
        f"GPS Fix: {gps.fix_quality}, "
        f"Lat: {gps.latitude:.6f} {gps.lat_dir}, "
        f"Lon: {gps.longitude:.6f} {gps.lon_dir}, "
        f"Alt: {gps.altitude_m:.2f} m, "
        f"Speed: {gps.speed_knots:.2f} knots"
    )


def process_pending(
    receiver: SentenceReceiver,
    gps: GpsData,
    port: Optional[serial.SerialBase],
) -> Optional[str]:
    """Decode a completed sentence held by ``receiver`` into ``gps``.

    Reports the sentence and the receiver counters, releases the receiver,
    and sends the greeting to ``port`` so that a looped-back line starts the
    cycle again. Returns the fix summary when ``gps`` has a fix, else None.
    """
    if receiver.state is not ReceiverState.READY:
        return None

    sentence = receiver.sentence()
    print(f"UART Complete: {sentence}")
    print(
        f"UART: {receiver.lfcr_rxed} lost sentences; "
        f"current message has {receiver.chars_rxed} characters; "
        f"{receiver.zeros_rxed} zeros received."
    )
    receiver.lfcr_rxed = 0
    receiver.zeros_rxed = 0

    try:
        gps.update(sentence)
    except NmeaError as exc:
        print(f"GPS: Error parsing NMEA sentence: {sentence} ({exc})")
    receiver.acknowledge()

    summary = format_fix(gps) if gps.has_fix else None

    written = False
    if port is not None:
        try:
            port.write(GREETING)
            written = True
        except serial.SerialException:
            written = False
    if not written:
        print("Could not write to UART for GPS loopback.")

    return summary


def run(
    port: str,
    display_interval: float = DISPLAY_INTERVAL,
    poll_interval: float = POLL_INTERVAL,
) -> None:
    """Read from ``port`` forever, decoding sentences and printing the fix periodically."""
    gps = GpsData()
    receiver = SentenceReceiver()
    print("Hello, GPS and UART!")
    with open_port(port) as connection:
        last_poll = last_display = time.monotonic()
        while True:
            waiting = connection.in_waiting
            if waiting:
                receiver.feed(connection.read(waiting))
            now = time.monotonic()
            if now - last_poll >= poll_interval:
                last_poll = now
                process_pending(receiver, gps, connection)
            if now - last_display >= display_interval:
                last_display = now
                print("\n" + format_fix(gps))
            time.sleep(_IDLE_SLEEP)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments and run the receive loop until interrupted."""
    parser = argparse.ArgumentParser(
        prog="picogps",
        description="Decode NMEA sentences arriving on a serial port.",
    )
    parser.add_argument("port", help="serial device or pyserial URL, e.g. loop://")
    parser.add_argument(
        "--display-interval",
        type=float,
        default=DISPLAY_INTERVAL,
        help="seconds between fix reports",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=POLL_INTERVAL,
        help="seconds between checks for a completed sentence",
    )
    args = parser.parse_args(argv)
    try:
        run(args.port, args.display_interval, args.poll_interval)
    except KeyboardInterrupt:
        return 0
    except serial.SerialException as exc:
        print(f"UART: not found ({exc})", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())