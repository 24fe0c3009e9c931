"""Decoding of NMEA 0183 sentences into a running GPS state record."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import reduce
from typing import Callable, List

BUFLEN = 160
GPS_BUFFER_SIZE = 160
MAX_FIELDS = 20

_FLOAT_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_RE = re.compile(r"\s*[+-]?\d+")
_HEX_RE = re.compile(r"\s*([+-]?)(?:0[xX])?([0-9a-fA-F]+)")


class NmeaError(ValueError):
    """Raised for a malformed, corrupt or unsupported NMEA sentence."""


def _atof(text: str) -> float:
    """Parse the leading decimal number of ``text``; 0.0 when there is none."""
    match = _FLOAT_RE.match(text)
    return float(match.group().strip()) if match else 0.0


def _atoi(text: str) -> int:
    """Parse the leading integer of ``text``; 0 when there is none."""
    match = _INT_RE.match(text)
    return int(match.group().strip()) if match else 0


def _hex_prefix(text: str) -> int:
    """Parse the leading hexadecimal number of ``text``; 0 when there is none."""
    match = _HEX_RE.match(text)
    if not match:
        return 0
    value = int(match.group(2), 16)
    return -value if match.group(1) == "-" else value


def _two_digits(text: str, start: int) -> int:
    return (ord(text[start]) - 48) * 10 + (ord(text[start + 1]) - 48)


def nmea_to_decimal(value: str, direction: str) -> float:
    """Convert a ``dddmm.mmmm`` coordinate to signed decimal degrees."""
    if not value:
        return 0.0
    raw = _atof(value)
    degrees = int(raw / 100)
    minutes = raw - degrees * 100
    decimal = degrees + minutes / 60.0
    if direction in ("S", "W"):
        decimal = -decimal
    return decimal


def checksum_ok(sentence: str) -> bool:
    """Check the XOR checksum between ``$`` and ``*`` against the hex digits after ``*``."""
    if not sentence.startswith("$"):
        return False
    star = sentence.find("*")
    if star < 0:
        return False
    total = reduce(lambda acc, ch: acc ^ (ord(ch) & 0xFF), sentence[1:star], 0)
    return total == _hex_prefix(sentence[star + 1:]) & 0xFF


def split_fields(body: str, max_fields: int) -> List[str]:
    """Split a sentence body on commas, dropping a final empty field, keeping at most ``max_fields``."""
    parts = body.split(",")
    if parts[-1] == "":
        parts.pop()
    return parts[:max_fields]


@dataclass
class GpsData:
    """Accumulated state decoded from NMEA sentences."""

    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    day: int = 0
    month: int = 0
    year: int = 0
    latitude: float = 0.0
    longitude: float = 0.0
    lat_dir: str = ""
    lon_dir: str = ""
    fix_quality: int = 0
    fix_quality_3d: int = 0
    has_fix: bool = False
    has_3d_fix: bool = False
    satellites: int = 0
    hdop: float = 0.0
    pdop: float = 0.0
    vdop: float = 0.0
    altitude_m: float = 0.0
    geoid_height: float = 0.0
    speed_knots: float = 0.0
    track_angle_deg: float = 0.0
    last_sentence: str = ""

    def update(self, sentence: str) -> None:
        """Decode one ``$...*hh`` sentence into this record; raise NmeaError if it cannot be used."""
        if not sentence.startswith("$") or not 6 <= len(sentence) < BUFLEN:
            raise NmeaError(f"invalid NMEA sentence: {sentence!r}")
        if not checksum_ok(sentence):
            raise NmeaError(f"invalid NMEA checksum: {sentence!r}")
        truncated = sentence[:GPS_BUFFER_SIZE - 1]
        self.last_sentence = truncated

        body = truncated.split("*", 1)[0][1:]
        fields = split_fields(body, MAX_FIELDS)
        if not fields:
            raise NmeaError(f"empty NMEA sentence: {sentence!r}")
        padded = fields + [""] * (MAX_FIELDS - len(fields))

        kind = fields[0][:3]
        for prefix, parser in _SENTENCE_PARSERS:
            if kind == prefix:
                parser(self, padded)
                return
        raise NmeaError(f"not a supported sentence: {fields[0]}")

    def _set_time(self, text: str) -> None:
        if len(text) < 6:
            return
        self.hours = _two_digits(text, 0)
        self.minutes = _two_digits(text, 2)
        self.seconds = _two_digits(text, 4)

    def _set_date(self, text: str) -> None:
        if len(text) < 6:
            return
        self.day = _two_digits(text, 0)
        self.month = _two_digits(text, 2)
        self.year = 2000 + _two_digits(text, 4)


def _parse_gga(gps: GpsData, fields: List[str]) -> None:
    gps._set_time(fields[1])
    gps.latitude = nmea_to_decimal(fields[2], fields[3][:1])
    gps.lat_dir = fields[3][:1]
    gps.longitude = nmea_to_decimal(fields[4], fields[5][:1])
    gps.lon_dir = fields[5][:1]
    gps.fix_quality = _atoi(fields[6])
    gps.satellites = _atoi(fields[7])
    gps.hdop = _atof(fields[8])
    gps.altitude_m = _atof(fields[9])
    gps.geoid_height = _atof(fields[11])
    gps.has_fix = gps.fix_quality > 0


def _parse_rmc(gps: GpsData, fields: List[str]) -> None:
    gps._set_time(fields[1])
    gps.latitude = nmea_to_decimal(fields[3], fields[4][:1])
    gps.longitude = nmea_to_decimal(fields[5], fields[6][:1])
    gps.speed_knots = _atof(fields[7])
    gps.track_angle_deg = _atof(fields[8])
    gps._set_date(fields[9])
    gps.has_fix = fields[2][:1] == "A"


def _parse_gll(gps: GpsData, fields: List[str]) -> None:
    gps.latitude = nmea_to_decimal(fields[1], fields[2][:1])
    gps.longitude = nmea_to_decimal(fields[3], fields[4][:1])
    gps._set_time(fields[5])
    gps.has_fix = fields[6][:1] == "A"


def _parse_gsa(gps: GpsData, fields: List[str]) -> None:
    gps.fix_quality_3d = _atoi(fields[2])
    gps.pdop = _atof(fields[15])
    gps.hdop = _atof(fields[16])
    gps.vdop = _atof(fields[17])
    gps.has_3d_fix = gps.fix_quality_3d >= 3


def _parse_gsv(gps: GpsData, fields: List[str]) -> None:
    gps.satellites = _atoi(fields[3])


# Sentences are recognised by the first three characters of their tag;
# the first matching prefix wins.
_SENTENCE_PARSERS: tuple[tuple[str, Callable[[GpsData, List[str]], None]], ...] = (
    ("GPG", _parse_gga),
    ("GNR", _parse_rmc),
    ("GNG", _parse_gll),
    ("GLG", _parse_gsa),
    ("GPG", _parse_gsv),
)