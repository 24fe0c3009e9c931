"""Assembly of NMEA sentences from a serial byte stream."""

from __future__ import annotations

from enum import IntEnum
from typing import Iterable, Union

import serial

BUFLEN = 160
DEBUG_LEN = BUFLEN * 10
BAUD_RATE = 115200
GREETING = b"\nHello, uart interrupts\n"

_DOLLAR = ord("$")
_LINE_ENDS = (ord("\n"), ord("\r"))


class ReceiverState(IntEnum):
    """Where the receiver is in collecting a sentence."""

    IDLE = 0
    STORING = 1
    READY = 2


class SentenceReceiver:
    """Collects one ``$``-started, line-terminated sentence at a time.

    Once a line ending is seen the sentence is held until ``acknowledge``
    is called; bytes arriving meanwhile are dropped, though line endings
    are still counted in ``lfcr_rxed``.
    """

    def __init__(self) -> None:
        self.state = ReceiverState.IDLE
        self.chars_rxed = 0
        self.lfcr_rxed = 0
        self.zeros_rxed = 0
        self.debug = bytearray()
        self._buffer = bytearray(BUFLEN)

    def feed(self, data: Union[bytes, bytearray, Iterable[int]]) -> ReceiverState:
        """Process received bytes and return the resulting state."""
        for byte in bytes(data):
            self._receive(byte)
        return self.state

    def acknowledge(self) -> None:
        """Release the held sentence so that a new one can be collected."""
        self.state = ReceiverState.IDLE
        self.chars_rxed = 0

    def sentence(self) -> str:
        """Return the characters collected so far."""
        return bytes(self._buffer[:self.chars_rxed]).decode("latin-1")

    def _receive(self, byte: int) -> None:
        if len(self.debug) < DEBUG_LEN:
            self.debug.append(byte)

        if byte == 0:
            self.zeros_rxed += 1
            return

        if self.state is ReceiverState.IDLE:
            if byte == _DOLLAR:
                self.state = ReceiverState.STORING
                self._buffer[0] = _DOLLAR
                self.chars_rxed = 1
                self.lfcr_rxed = 0
            return

        if self.chars_rxed > BUFLEN - 2 and self.state is ReceiverState.STORING:
            # Overruns are discarded; they are likely corrupt anyway.
            self._buffer[BUFLEN - 1] = 0
            self.state = ReceiverState.IDLE
            return

        if byte in _LINE_ENDS:
            self._buffer[self.chars_rxed] = 0
            self.state = ReceiverState.READY
            self.lfcr_rxed += 1
            return

        if self.state is ReceiverState.STORING:
            self._buffer[self.chars_rxed] = byte
            self.chars_rxed += 1


def open_port(port: str, baudrate: int = BAUD_RATE) -> serial.SerialBase:
    """Open ``port`` as 8N1 without flow control, non-blocking, and send the greeting."""
    connection = serial.serial_for_url(
        port,
        baudrate=baudrate,
        bytesize=serial.EIGHTBITS,
        parity=serial.PARITY_NONE,
        stopbits=serial.STOPBITS_ONE,
        rtscts=False,
        timeout=0,
    )
    connection.write(GREETING)
    return connection