from __future__ import annotations

import struct
from dataclasses import dataclass

from ._error import ChronoError
from ._types import DateTime, Frequency, Schedule

# =============================================================================
# Wire Format
# =============================================================================
# SCALE-style, little-endian, no padding:
#
#   DateTime  = u16 year | u8 month | u8 day | u8 hour | u8 minute
#               | u8 second | u16 ms                               (9 bytes)
#   Frequency = u8 variant index, in declaration order (Ms=0 .. Year=7)
#   Schedule  = DateTime start
#               | compact(len) | len * (Frequency, u32 multiplier)
#               | u8 option tag (0 = None, 1 = Some) [| DateTime end]
#
# compact(n) is the SCALE compact integer: the two low bits of the first byte
# select a 1, 2 or 4 byte encoding, or a length-prefixed big integer.
# =============================================================================

_DATETIME = struct.Struct("<HBBBBBH")
_ITEM = struct.Struct("<BI")

_FREQUENCIES = tuple(Frequency)
_FREQUENCY_INDEX = {freq: i for i, freq in enumerate(_FREQUENCIES)}

_VARIANT_NAMES = {
    Frequency.MS: "Ms",
    Frequency.SECOND: "Second",
    Frequency.MINUTE: "Minute",
    Frequency.HOUR: "Hour",
    Frequency.DAY: "Day",
    Frequency.WEEK: "Week",
    Frequency.MONTH: "Month",
    Frequency.YEAR: "Year",
}


@dataclass(frozen=True, slots=True)
class TypeInfo:
    """Structural description of an encoded type."""

    name: str
    fields: tuple[tuple[str, str], ...] = ()
    variants: tuple[str, ...] = ()


_TYPE_INFO: dict[type, TypeInfo] = {
    DateTime: TypeInfo(
        name="DateTime",
        fields=(
            ("year", "u16"),
            ("month", "u8"),
            ("day", "u8"),
            ("hour", "u8"),
            ("minute", "u8"),
            ("second", "u8"),
            ("ms", "u16"),
        ),
    ),
    Frequency: TypeInfo(
        name="Frequency",
        variants=tuple(_VARIANT_NAMES[freq] for freq in _FREQUENCIES),
    ),
    Schedule: TypeInfo(
        name="Schedule",
        fields=(
            ("start", "DateTime"),
            ("items", "Vec<(Frequency, u32)>"),
            ("end", "Option<DateTime>"),
        ),
    ),
}


def type_info(cls: type) -> TypeInfo:
    try:
        return _TYPE_INFO[cls]
    except KeyError:
        raise ChronoError.codec(f"no type layout for {cls.__name__}") from None


# --- Compact integers ---


def _encode_compact(n: int) -> bytes:
    if n < 0:
        raise ChronoError.codec(f"compact integer must be non-negative, got {n}")
    if n < 1 << 6:
        return bytes([n << 2])
    if n < 1 << 14:
        return ((n << 2) | 0b01).to_bytes(2, "little")
    if n < 1 << 30:
        return ((n << 2) | 0b10).to_bytes(4, "little")
    size = max((n.bit_length() + 7) // 8, 4)
    if size > 67:
        raise ChronoError.codec(f"compact integer too large: {n}")
    return bytes([((size - 4) << 2) | 0b11]) + n.to_bytes(size, "little")


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def take(self, n: int) -> bytes:
        if self._pos + n > len(self._data):
            raise ChronoError.codec(
                f"unexpected end of input: wanted {n} bytes at offset {self._pos}"
            )
        chunk = self._data[self._pos : self._pos + n]
        self._pos += n
        return chunk

    def compact(self) -> int:
        first = self.take(1)[0]
        match first & 0b11:
            case 0b00:
                return first >> 2
            case 0b01:
                return int.from_bytes(bytes([first]) + self.take(1), "little") >> 2
            case 0b10:
                return int.from_bytes(bytes([first]) + self.take(3), "little") >> 2
            case _:
                return int.from_bytes(self.take((first >> 2) + 4), "little")

    def finish(self) -> None:
        if self._pos != len(self._data):
            raise ChronoError.codec(f"{len(self._data) - self._pos} trailing bytes")


# --- DateTime ---


def _pack_datetime(dt: DateTime) -> bytes:
    try:
        return _DATETIME.pack(dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second, dt.ms)
    except struct.error as e:
        raise ChronoError.codec(f"{dt!r} does not fit the wire layout: {e}") from e


def _read_datetime(reader: _Reader) -> DateTime:
    year, month, day, hour, minute, second, ms = _DATETIME.unpack(reader.take(_DATETIME.size))
    return DateTime(
        year=year, month=month, day=day, hour=hour, minute=minute, second=second, ms=ms
    )


def encode_datetime(dt: DateTime) -> bytes:
    return _pack_datetime(dt)


def decode_datetime(data: bytes) -> DateTime:
    reader = _Reader(data)
    dt = _read_datetime(reader)
    reader.finish()
    return dt


# --- Schedule ---


def encode_schedule(schedule: Schedule) -> bytes:
    out = bytearray(_pack_datetime(schedule.start))
    out += _encode_compact(len(schedule.items))
    for freq, multiplier in schedule.items:
        try:
            out += _ITEM.pack(_FREQUENCY_INDEX[freq], multiplier)
        except struct.error as e:
            raise ChronoError.codec(f"multiplier {multiplier} does not fit u32") from e
    if schedule.end is None:
        out.append(0)
    else:
        out.append(1)
        out += _pack_datetime(schedule.end)
    return bytes(out)


def decode_schedule(data: bytes) -> Schedule:
    reader = _Reader(data)
    start = _read_datetime(reader)

    items: list[tuple[Frequency, int]] = []
    for _ in range(reader.compact()):
        index, multiplier = _ITEM.unpack(reader.take(_ITEM.size))
        if index >= len(_FREQUENCIES):
            raise ChronoError.codec(f"unknown frequency index {index}")
        items.append((_FREQUENCIES[index], multiplier))

    tag = reader.take(1)[0]
    match tag:
        case 0:
            end = None
        case 1:
            end = _read_datetime(reader)
        case _:
            raise ChronoError.codec(f"invalid option tag {tag}")
    reader.finish()

    # Schedule construction enforces multiplier and length limits.
    return Schedule(start=start, items=tuple(items), end=end)
