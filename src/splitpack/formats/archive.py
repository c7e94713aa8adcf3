"""Zip archive decomposition, estimation and rebuilding.

Entries are never decompressed: each entry's local record (local header,
compressed payload, optional data descriptor) is copied byte for byte into
the chunk, and a new central directory is written that points at the
record's new offset.
"""

import logging
import struct
import zipfile
from dataclasses import dataclass
from io import BytesIO
from typing import Sequence

from splitpack.errors import MalformedArchive
from splitpack.models import FormatKind, SourceFile, Unit

logger = logging.getLogger(__name__)

LOCAL_HEADER = struct.Struct("<4s5H3L2H")
CENTRAL_HEADER = struct.Struct("<4s6H3L5H2L")
END_RECORD = struct.Struct("<4s4H2LH")

LOCAL_HEADER_MAGIC = b"PK\x03\x04"
CENTRAL_HEADER_MAGIC = b"PK\x01\x02"
END_RECORD_MAGIC = b"PK\x05\x06"
DATA_DESCRIPTOR_MAGIC = b"PK\x07\x08"

FLAG_DATA_DESCRIPTOR = 0x08
FLAG_UTF8 = 0x800
ZIP64_EXTRA_ID = 0x0001
MAX_ENTRIES = 0xFFFF


def _dos_datetime(date_time: tuple) -> tuple[int, int]:
    year, month, day, hour, minute, second = date_time
    dos_time = (hour << 11) | (minute << 5) | (second // 2)
    dos_date = ((year - 1980) << 9) | (month << 5) | day
    return dos_time, dos_date


def _has_zip64_extra(extra: bytes) -> bool:
    offset = 0
    while offset + 4 <= len(extra):
        header_id, size = struct.unpack_from("<2H", extra, offset)
        if header_id == ZIP64_EXTRA_ID:
            return True
        offset += 4 + size
    return False


@dataclass(frozen=True)
class ArchiveEntry:
    """One entry's verbatim local record and its central directory fields."""

    info: zipfile.ZipInfo
    record: bytes
    payload_start: int  # offset of the compressed payload inside ``record``

    @property
    def payload(self) -> bytes:
        return self.record[self.payload_start : self.payload_start + self.info.compress_size]

    @property
    def encoded_name(self) -> bytes:
        encoding = "utf-8" if self.info.flag_bits & FLAG_UTF8 else "cp437"
        return self.info.orig_filename.encode(encoding)

    @property
    def central_size(self) -> int:
        return (
            CENTRAL_HEADER.size
            + len(self.encoded_name)
            + len(self.info.extra)
            + len(self.info.comment)
        )

    def central_record(self, offset: int) -> bytes:
        """Central directory header for this entry at local-header ``offset``."""
        info = self.info
        dos_time, dos_date = _dos_datetime(info.date_time)
        name = self.encoded_name
        header = CENTRAL_HEADER.pack(
            CENTRAL_HEADER_MAGIC,
            (info.create_system << 8) | info.create_version,
            (info.reserved << 8) | info.extract_version,
            info.flag_bits,
            info.compress_type,
            dos_time,
            dos_date,
            info.CRC,
            info.compress_size,
            info.file_size,
            len(name),
            len(info.extra),
            len(info.comment),
            0,
            info.internal_attr,
            info.external_attr,
            offset,
        )
        return header + name + info.extra + info.comment


class ArchiveChunkEstimate:
    """Running size of a zip chunk: records plus directory plus end record."""

    def __init__(self, comment: bytes):
        self._total = END_RECORD.size + len(comment)

    @property
    def total(self) -> int:
        return self._total

    def marginal_cost(self, unit: Unit) -> int:
        return unit.cost

    def add(self, unit: Unit) -> None:
        self._total += unit.cost


class ArchiveSource:
    """A zip archive decomposed into its entries."""

    def __init__(self, entries: list[ArchiveEntry], comment: bytes = b""):
        self.entries = entries
        self.comment = comment
        self._units = [
            Unit(
                index=index,
                label=entry.info.filename,
                cost=len(entry.record) + entry.central_size,
            )
            for index, entry in enumerate(entries)
        ]

    @property
    def units(self) -> Sequence[Unit]:
        return self._units

    def new_estimate(self) -> ArchiveChunkEstimate:
        return ArchiveChunkEstimate(self.comment)

    def build(self, units: Sequence[Unit]) -> bytes:
        """Write a new archive holding exactly ``units`` in the given order."""
        buffer = BytesIO()
        central = []
        for unit in units:
            entry = self.entries[unit.index]
            central.append(entry.central_record(buffer.tell()))
            buffer.write(entry.record)

        directory_offset = buffer.tell()
        for record in central:
            buffer.write(record)
        directory_size = buffer.tell() - directory_offset

        buffer.write(
            END_RECORD.pack(
                END_RECORD_MAGIC,
                0,
                0,
                len(units),
                len(units),
                directory_size,
                directory_offset,
                len(self.comment),
            )
        )
        buffer.write(self.comment)
        return buffer.getvalue()


class ArchiveDecomposer:
    """Decomposer for zip archives."""

    kind = FormatKind.ARCHIVE

    def decompose(self, source: SourceFile) -> ArchiveSource:
        """Read the central directory and slice out each entry's raw record.

        Raises:
            MalformedArchive: If the directory or any local record is invalid,
                the archive needs ZIP64, or it has no entries
        """
        try:
            with zipfile.ZipFile(BytesIO(source.data), "r") as zf:
                infos = zf.infolist()
                comment = zf.comment
        except (zipfile.BadZipFile, ValueError, EOFError, struct.error) as exc:
            raise MalformedArchive(f"Unreadable central directory: {exc}") from exc

        if not infos:
            raise MalformedArchive("Archive has no entries")
        if len(infos) > MAX_ENTRIES:
            raise MalformedArchive("ZIP64 archives are not supported")

        entries = [self._read_entry(source.data, info) for info in infos]
        logger.debug("Decomposed %s into %d entries", source.name, len(entries))
        return ArchiveSource(entries, comment)

    @staticmethod
    def _read_entry(data: bytes, info: zipfile.ZipInfo) -> ArchiveEntry:
        if _has_zip64_extra(info.extra):
            raise MalformedArchive(f"{info.filename}: ZIP64 entries are not supported")

        offset = info.header_offset
        if offset < 0 or offset + LOCAL_HEADER.size > len(data):
            raise MalformedArchive(f"{info.filename}: local header out of range")

        fields = LOCAL_HEADER.unpack_from(data, offset)
        if fields[0] != LOCAL_HEADER_MAGIC:
            raise MalformedArchive(f"{info.filename}: bad local header signature")
        name_length, extra_length = fields[-2], fields[-1]

        payload_start = LOCAL_HEADER.size + name_length + extra_length
        end = offset + payload_start + info.compress_size

        if info.flag_bits & FLAG_DATA_DESCRIPTOR:
            # The descriptor signature is optional
            if data[end : end + 4] == DATA_DESCRIPTOR_MAGIC:
                end += 16
            else:
                end += 12

        if end > len(data):
            raise MalformedArchive(f"{info.filename}: entry data is truncated")

        return ArchiveEntry(info=info, record=data[offset:end], payload_start=payload_start)
