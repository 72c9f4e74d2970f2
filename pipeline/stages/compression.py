"""
Streaming gzip codec: plain file <-> single-member gzip file.
"""

import gzip
import logging
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from pipeline_errors import CompressError, DecompressError

logger = logging.getLogger(__name__)

# zlib window bits selecting gzip framing (header + CRC32/ISIZE trailer)
GZIP_WBITS = 16 + zlib.MAX_WBITS


@dataclass(frozen=True)
class CopyResult:
    """Byte counts of one streaming copy"""
    bytes_read: int
    bytes_written: int


class GzipCodec:
    """
    Streams bytes between a plain file and a gzip-framed file.

    Both directions work in fixed-size chunks so memory use does not depend
    on the file size.
    """

    def __init__(self,
                 chunk_size: int = 64 * 1024,
                 compression_level: int = zlib.Z_DEFAULT_COMPRESSION):
        """
        Initialize the codec.

        Args:
            chunk_size: Size of each read and of each decompressed piece
            compression_level: zlib level, -1 selects the library default
        """
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        if compression_level < -1 or compression_level > 9:
            raise ValueError("Compression level must be between -1 and 9")

        self.chunk_size = chunk_size
        self.compression_level = compression_level

    def compress(self, src: Path, dst: Path) -> CopyResult:
        """
        Compress ``src`` into a single gzip member at ``dst``.

        The source is opened before the destination is created, so an
        unreadable source leaves nothing behind. The gzip stream is closed
        before the file under it so the trailer always lands on disk.

        Raises:
            CompressError: on any I/O error at either end or mid-copy
        """
        try:
            with open(src, 'rb') as fin:
                with open(dst, 'wb') as fout:
                    # filename='' keeps FNAME out of the header, mtime=0 keeps reruns byte-identical
                    with gzip.GzipFile(filename='', mode='wb', fileobj=fout,
                                       compresslevel=self.compression_level, mtime=0) as gz:
                        bytes_read = self._copy(fin, gz)
                    bytes_written = fout.tell()
        except OSError as e:
            raise CompressError(f"cannot compress {src} -> {dst}", cause=e,
                                details={'src': str(src), 'dst': str(dst)}) from e

        logger.debug(f"Compressed {src}: {bytes_read} -> {bytes_written} bytes")
        return CopyResult(bytes_read=bytes_read, bytes_written=bytes_written)

    def decompress(self, src: Path, dst: Path) -> CopyResult:
        """
        Decode the first gzip member of ``src`` into ``dst``.

        Bytes after the end of the first member are ignored.

        Raises:
            DecompressError: if the input is not gzip, is corrupt or is
                truncated, or on any I/O error
        """
        try:
            with open(src, 'rb') as fin:
                with open(dst, 'wb') as fout:
                    bytes_read, bytes_written = self._inflate(fin, fout, src)
        except (OSError, zlib.error) as e:
            raise DecompressError(f"cannot decompress {src} -> {dst}", cause=e,
                                  details={'src': str(src), 'dst': str(dst)}) from e

        logger.debug(f"Decompressed {src}: {bytes_read} -> {bytes_written} bytes")
        return CopyResult(bytes_read=bytes_read, bytes_written=bytes_written)

    def _copy(self, reader: BinaryIO, writer) -> int:
        total = 0
        while chunk := reader.read(self.chunk_size):
            writer.write(chunk)
            total += len(chunk)
        return total

    def _inflate(self, fin: BinaryIO, fout: BinaryIO, src: Path):
        decompressor = zlib.decompressobj(wbits=GZIP_WBITS)
        bytes_read = 0
        bytes_written = 0

        while not decompressor.eof:
            chunk = fin.read(self.chunk_size)
            if not chunk:
                break
            bytes_read += len(chunk)

            data = decompressor.decompress(chunk, self.chunk_size)
            fout.write(data)
            bytes_written += len(data)

            # Drain input held back by the output bound
            while decompressor.unconsumed_tail and not decompressor.eof:
                data = decompressor.decompress(decompressor.unconsumed_tail, self.chunk_size)
                fout.write(data)
                bytes_written += len(data)

        if not decompressor.eof:
            reason = "empty file" if bytes_read == 0 else "truncated gzip stream"
            raise DecompressError(f"cannot decompress {src}: {reason}",
                                  details={'src': str(src), 'bytes_read': bytes_read})

        # Count only the bytes belonging to the first member
        bytes_read -= len(decompressor.unused_data)
        return bytes_read, bytes_written


_default_codec = GzipCodec()


def compress_file(src, dst) -> CopyResult:
    """Compress ``src`` to ``dst`` with default settings"""
    return _default_codec.compress(Path(src), Path(dst))


def decompress_file(src, dst) -> CopyResult:
    """Decompress ``src`` to ``dst`` with default settings"""
    return _default_codec.decompress(Path(src), Path(dst))
