from functools import reduce

import pytest
import serial

from picogps.app import format_fix, main, process_pending
from picogps.gps import GpsData, checksum_ok
from picogps.receiver import GREETING, ReceiverState, SentenceReceiver


def _with_checksum(body: str) -> str:
    total = reduce(lambda acc, ch: acc ^ ord(ch), body, 0)
    return f"${body}*{total:02X}"


GGA = _with_checksum("GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,")
NO_FIX_GGA = _with_checksum("GPGGA,123519,4807.038,N,01131.000,E,0,00,0.9,545.4,M,46.9,M,,")


class _FakePort:
    def __init__(self):
        self.written = bytearray()

    def write(self, data):
        self.written.extend(data)
        return len(data)


class _BrokenPort:
    def write(self, data):
        raise serial.SerialException("gone")


def _ready_receiver(sentence: str) -> SentenceReceiver:
    receiver = SentenceReceiver()
    assert receiver.feed((sentence + "\r\n").encode("latin-1")) is ReceiverState.READY
    return receiver


def test_sample_sentence_has_valid_checksum():
    assert checksum_ok(GGA)


def test_format_fix_worked_example():
    gps = GpsData()
    gps.update(GGA)
    assert format_fix(gps) == (
        "GPS Fix: 1, Lat: 48.117300 N, Lon: 11.516667 E, "
        "Alt: 545.40 m, Speed: 0.00 knots"
    )


def test_format_fix_default_record():
    text = format_fix(GpsData())
    assert text.startswith("GPS Fix: 0, Lat: 0.000000")
    assert text.endswith("Speed: 0.00 knots")


def test_process_pending_idle_does_nothing(capsys):
    receiver = SentenceReceiver()
    port = _FakePort()
    gps = GpsData()
    assert process_pending(receiver, gps, port) is None
    assert receiver.state is ReceiverState.IDLE
    assert port.written == bytearray()
    assert capsys.readouterr().out == ""
    assert gps == GpsData()


def test_process_pending_decodes_and_loops_back(capsys):
    receiver = _ready_receiver(GGA)
    port = _FakePort()
    gps = GpsData()
    summary = process_pending(receiver, gps, port)
    assert summary == format_fix(gps)
    assert gps.has_fix is True
    assert gps.last_sentence == GGA
    assert receiver.state is ReceiverState.IDLE
    assert receiver.chars_rxed == 0
    assert receiver.lfcr_rxed == 0
    assert receiver.zeros_rxed == 0
    assert bytes(port.written) == GREETING
    out = capsys.readouterr().out
    assert f"UART Complete: {GGA}" in out
    assert f"current message has {len(GGA)} characters" in out


def test_process_pending_without_fix_returns_none():
    receiver = _ready_receiver(NO_FIX_GGA)
    gps = GpsData()
    assert process_pending(receiver, gps, _FakePort()) is None
    assert gps.has_fix is False
    assert receiver.state is ReceiverState.IDLE


def test_process_pending_reports_bad_checksum(capsys):
    corrupt = GGA[:-2] + ("00" if GGA[-2:] != "00" else "11")
    receiver = _ready_receiver(corrupt)
    gps = GpsData()
    assert process_pending(receiver, gps, _FakePort()) is None
    assert "GPS: Error parsing NMEA sentence" in capsys.readouterr().out
    assert receiver.state is ReceiverState.IDLE
    assert gps == GpsData()


def test_process_pending_counts_zero_bytes(capsys):
    receiver = SentenceReceiver()
    receiver.feed(b"$" + b"\x00\x00" + GGA[1:].encode() + b"\n")
    process_pending(receiver, GpsData(), _FakePort())
    assert "2 zeros received." in capsys.readouterr().out
    assert receiver.zeros_rxed == 0


@pytest.mark.parametrize("port", [None, _BrokenPort()])
def test_process_pending_reports_unwritable_port(capsys, port):
    receiver = _ready_receiver(GGA)
    process_pending(receiver, GpsData(), port)
    assert "Could not write to UART for GPS loopback." in capsys.readouterr().out
    assert receiver.state is ReceiverState.IDLE


def test_process_pending_on_loopback_port_echoes_greeting():
    connection = serial.serial_for_url("loop://", timeout=0)
    try:
        receiver = _ready_receiver(GGA)
        process_pending(receiver, GpsData(), connection)
        assert connection.read(len(GREETING)) == GREETING
        # Feeding the echoed greeting does not start a new sentence.
        assert receiver.feed(GREETING) is ReceiverState.IDLE
    finally:
        connection.close()


def test_main_help_exits_cleanly():
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])
    assert excinfo.value.code == 0


def test_main_reports_missing_port(tmp_path, capsys):
    missing = str(tmp_path / "no-such-device")
    assert main([missing]) == 1
    captured = capsys.readouterr()
    assert "Hello, GPS and UART!" in captured.out
    assert "UART: not found" in captured.err