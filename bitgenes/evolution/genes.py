"""
Packed Bit Genome (GeneBuffer)

Fixed-length genome storage: one bit per gene, packed eight to a byte in a
numpy uint8 array. Bit i lives in byte i // 8 at position i % 8, bit 0 being
the least significant. Reads outside the genome return 0 and writes outside it
are ignored, so scoring functions can address genomes without bounds checks.
"""

from typing import Iterable, Optional, Union

import numpy as np

from .exceptions import validate_genome_bits


# Widths supported by the typed big-endian readers
UINT_WIDTHS = (8, 16, 32, 64, 128)

BytesLike = Union[bytes, bytearray, memoryview, np.ndarray, Iterable[int]]


class GeneBuffer:
    """Bit-packed genome with typed multi-bit accessors.

    Attributes:
        bit_count: logical number of genes
    """

    __slots__ = ("_data", "_bit_count")

    def __init__(self, n_bits: int = 0):
        """Create a zero-filled genome.

        Args:
            n_bits: number of genes; the backing store holds ceil(n_bits / 8) bytes

        Raises:
            InvalidSizeError: if n_bits is not a representable bit count
        """
        validate_genome_bits(n_bits)
        self._bit_count = int(n_bits)
        self._data = np.zeros((self._bit_count + 7) // 8, dtype=np.uint8)

    @classmethod
    def from_bytes(cls, data: BytesLike, bit_count: Optional[int] = None) -> "GeneBuffer":
        """Wrap an existing byte sequence as genome storage.

        uint8 numpy arrays and bytearrays are wrapped without copying, so later
        writes through the genome are visible in the caller's buffer. The
        length is not checked against bit_count.

        Args:
            data: genome bytes
            bit_count: number of genes, defaults to 8 * len(data)

        Returns:
            genome backed by data

        Raises:
            InvalidSizeError: if bit_count is not a representable bit count
        """
        if isinstance(data, np.ndarray):
            buffer = data if data.dtype == np.uint8 else data.astype(np.uint8)
            buffer = buffer.reshape(-1)
            if not buffer.flags.writeable:
                buffer = buffer.copy()
        elif isinstance(data, bytearray):
            buffer = np.frombuffer(data, dtype=np.uint8)
        else:
            buffer = np.array(bytearray(data), dtype=np.uint8)

        if bit_count is None:
            bit_count = buffer.size * 8
        validate_genome_bits(bit_count)

        genome = cls.__new__(cls)
        genome._data = buffer
        genome._bit_count = int(bit_count)
        return genome

    @property
    def bit_count(self) -> int:
        return self._bit_count

    @property
    def byte_count(self) -> int:
        return int(self._data.size)

    @property
    def addressable_bits(self) -> int:
        """Number of genes that are both inside bit_count and the backing buffer."""
        return min(self._bit_count, self._data.size * 8)

    def _in_range(self, index: int) -> bool:
        return 0 <= index < self._bit_count and (index >> 3) < self._data.size

    # ------------------------------------------------------------------
    # Single-gene access
    # ------------------------------------------------------------------

    def get(self, index: int) -> int:
        """Return gene `index` as 0 or 1; out-of-range genes read as 0."""
        if not self._in_range(index):
            return 0
        return int(self._data[index >> 3] >> (index & 7)) & 1

    def set(self, index: int) -> None:
        """Set gene `index` to 1."""
        if self._in_range(index):
            self._data[index >> 3] |= np.uint8(1 << (index & 7))

    def clear(self, index: int) -> None:
        """Set gene `index` to 0."""
        if self._in_range(index):
            self._data[index >> 3] &= ~np.uint8(1 << (index & 7))

    def flip(self, index: int) -> None:
        """Invert gene `index`."""
        if self._in_range(index):
            self._data[index >> 3] ^= np.uint8(1 << (index & 7))

    def wipe(self) -> None:
        """Reset every gene to 0."""
        self._data.fill(0)

    # ------------------------------------------------------------------
    # Typed views
    # ------------------------------------------------------------------

    def read_uint(self, slot: int, width: int) -> int:
        """Read the `slot`-th unsigned integer of `width` bits, big-endian.

        Slot s of width k covers bytes [s * k/8, s * k/8 + k/8). Slots that do
        not fit entirely inside the buffer read as 0.

        Args:
            slot: index of the field within the width-k view
            width: field width in bits, one of 8, 16, 32, 64, 128

        Returns:
            decoded unsigned integer

        Raises:
            ValueError: if width is not a supported field width
        """
        if width not in UINT_WIDTHS:
            raise ValueError(f"Unsupported field width {width}, expected one of {UINT_WIDTHS}")

        step = width // 8
        start = slot * step
        if slot < 0 or start + step > self._data.size:
            return 0
        return int.from_bytes(self._data[start:start + step].tobytes(), "big")

    def read_u8(self, slot: int) -> int:
        return self.read_uint(slot, 8)

    def read_u16(self, slot: int) -> int:
        return self.read_uint(slot, 16)

    def read_u32(self, slot: int) -> int:
        return self.read_uint(slot, 32)

    def read_u64(self, slot: int) -> int:
        return self.read_uint(slot, 64)

    def read_u128(self, slot: int) -> int:
        return self.read_uint(slot, 128)

    # ------------------------------------------------------------------
    # Bulk views used by the genetic operators
    # ------------------------------------------------------------------

    def to_bits(self) -> np.ndarray:
        """Unpack the addressable genes into a 0/1 uint8 array."""
        return np.unpackbits(self._data, bitorder="little")[:self.addressable_bits]

    def assign_bits(self, bits: np.ndarray) -> None:
        """Overwrite the leading genes with `bits`; bits past the genome are dropped."""
        count = min(len(bits), self.addressable_bits)
        unpacked = np.unpackbits(self._data, bitorder="little")
        unpacked[:count] = bits[:count]
        self._data[:] = np.packbits(unpacked, bitorder="little")

    def flip_bits(self, mask: np.ndarray) -> int:
        """Invert every gene whose mask entry is true.

        Returns:
            number of genes flipped
        """
        count = min(len(mask), self.addressable_bits)
        padded = np.zeros(self._data.size * 8, dtype=np.uint8)
        padded[:count] = mask[:count]
        self._data ^= np.packbits(padded, bitorder="little")
        return int(padded.sum())

    def count_ones(self) -> int:
        return int(self.to_bits().sum())

    def to_bytes(self) -> bytes:
        return self._data.tobytes()

    def clone(self) -> "GeneBuffer":
        """Independent value copy of this genome."""
        return GeneBuffer.from_bytes(self._data.copy(), self._bit_count)

    def __len__(self) -> int:
        return self._bit_count

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeneBuffer):
            return NotImplemented
        return self._bit_count == other._bit_count and np.array_equal(self._data, other._data)

    __hash__ = None

    def __repr__(self) -> str:
        preview = self._data[:16].tobytes().hex()
        if self._data.size > 16:
            preview += "..."
        return f"GeneBuffer(bits={self._bit_count}, data={preview!r})"
