# ISO-BMFF box walking, just enough of it to read a movie's duration
# from moov/mvhd.

from __future__ import annotations

import io
import logging
import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, Final, Optional

from typing_extensions import Buffer

from . import constants

log = logging.getLogger("BoxParser")

u32: Final = struct.Struct(">I")
u64: Final = struct.Struct(">Q")
box_header: Final = struct.Struct(">I4s")


class BoxDecodeError(ValueError):
    """Box decode error."""


@dataclass(frozen=True)
class BoxHeader:
    size: int
    type: bytes
    header_size: int = constants.HEADER_SIZE

    @property
    def payload_size(self) -> int:
        return self.size - self.header_size


@dataclass(frozen=True)
class BoxLocation:
    size: int
    payload_offset: int
    header_size: int = constants.HEADER_SIZE

    @property
    def end(self) -> int:
        return self.payload_offset - self.header_size + self.size


@dataclass(frozen=True)
class DurationResult:
    seconds: float = 0.0
    found: bool = False


NOT_FOUND: Final = DurationResult()


def _read_exact(stream: BinaryIO, n: int) -> bytes:
    data = stream.read(n)
    if len(data) != n:
        raise BoxDecodeError(f"short read, wanted {n} bytes, got {len(data)}")
    return data


def _stream_end(stream: BinaryIO) -> int:
    pos = stream.tell()
    end = stream.seek(0, io.SEEK_END)
    stream.seek(pos)
    return end


def read_box_header(stream: BinaryIO) -> Optional[BoxHeader]:
    """
    Reads one box header at the current position.

    Returns None at a clean end of stream. A size field of 1 means the real
    size follows as a 64-bit integer and the header is 16 bytes long.
    """
    first = stream.read(constants.HEADER_SIZE)
    if not first:
        return None
    if len(first) != constants.HEADER_SIZE:
        raise BoxDecodeError(f"truncated box header ({len(first)} bytes)")

    size, box_type = box_header.unpack(first)
    if size == constants.LARGE_SIZE_MARKER:
        (size,) = u64.unpack(_read_exact(stream, u64.size))
        return BoxHeader(size, box_type, constants.LARGE_HEADER_SIZE)
    return BoxHeader(size, box_type)


def find_box(stream: BinaryIO, target: bytes, end: Optional[int] = None) -> Optional[BoxLocation]:
    """
    Scans sibling boxes from the current position until one tagged `target`.

    On a match the stream is left at the start of the box payload. Boxes
    that don't match are skipped whole, never descended into. Returns None
    when the stream (or the `end` offset) is exhausted first, or on a short
    read or a size that can't be skipped.
    """
    limit = _stream_end(stream)
    if end is not None:
        limit = min(limit, end)

    try:
        while stream.tell() < limit:
            if limit - stream.tell() < constants.HEADER_SIZE:
                raise BoxDecodeError(f"{limit - stream.tell()} trailing bytes, too few for a box header")
            header = read_box_header(stream)
            if header is None:
                break

            if header.type == target:
                return BoxLocation(header.size, stream.tell(), header.header_size)

            if header.size < header.header_size:
                raise BoxDecodeError(
                    f"box {header.type!r} declares size {header.size}, smaller than its header"
                )
            next_box = stream.tell() + header.payload_size
            if next_box > limit:
                raise BoxDecodeError(
                    f"box {header.type!r} runs past the end of its container ({next_box} > {limit})"
                )
            stream.seek(next_box)
    except BoxDecodeError as e:
        log.debug(f"Stopped looking for {target!r}: {e}")
    return None


def parse_movie_header(stream: BinaryIO) -> DurationResult:
    """
    Decodes the duration from an mvhd payload.

    The stream must sit at the start of the payload, as left by
    find_box(stream, b"mvhd").
    """
    try:
        version = _read_exact(stream, 1)[0]
        _read_exact(stream, constants.MVHD_FLAGS_SIZE)

        if version == 1:
            _read_exact(stream, constants.MVHD_V1_TIMES_SIZE)
            (timescale,) = u32.unpack(_read_exact(stream, u32.size))
            (duration,) = u64.unpack(_read_exact(stream, u64.size))
        else:
            _read_exact(stream, constants.MVHD_V0_TIMES_SIZE)
            (timescale,) = u32.unpack(_read_exact(stream, u32.size))
            (duration,) = u32.unpack(_read_exact(stream, u32.size))
    except BoxDecodeError as e:
        log.debug(f"Truncated mvhd: {e}")
        return NOT_FOUND

    if timescale == 0:
        return NOT_FOUND
    return DurationResult(duration / timescale, True)


def read_duration(stream: BinaryIO) -> DurationResult:
    """
    Finds moov, then scans siblings from moov's payload start for mvhd.

    The mvhd scan is not stopped at the end of moov, so an mvhd following
    moov is picked up too. A moov with a size of 0 runs to the end of the
    file; any other size smaller than its header is malformed.
    """
    moov = find_box(stream, constants.BOX_MOOV)
    if moov is None:
        return NOT_FOUND
    if 0 < moov.size < moov.header_size:
        log.debug(f"moov declares size {moov.size}, smaller than its header")
        return NOT_FOUND

    if find_box(stream, constants.BOX_MVHD) is None:
        return NOT_FOUND

    return parse_movie_header(stream)


def get_duration(file_path: str | os.PathLike) -> DurationResult:
    """Returns the movie duration stored in an MP4 file, or NOT_FOUND."""
    try:
        with open(file_path, "rb") as f:
            return read_duration(f)
    except OSError as e:
        log.debug(f"Could not read {file_path}: {e}")
        return NOT_FOUND


def duration_from_bytes(value: Buffer, /) -> DurationResult:
    """Same as get_duration, for MP4 data already in memory."""
    with io.BytesIO(memoryview(value).cast("B")) as f:
        return read_duration(f)
