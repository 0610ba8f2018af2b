import numpy as np

DEFAULT_BITS_PER_BYTE = 8

# unit width (bits) -> numpy dtype of one buffer element
SUPPORTED_WIDTHS = {
    8: np.uint8,
    16: np.uint16,
    32: np.uint32,
    64: np.uint64,
}


def bit_mask(bit_index: int, bits_per_byte: int = DEFAULT_BITS_PER_BYTE) -> int:
    """
    Mask with only the bit at bit_index set, counting from the MSB.
    e.g. bit_index=0 -> 0x80 for 8-bit units, 0x8000 for 16-bit units.
    """
    return 1 << (bits_per_byte - 1 - bit_index)


def byte_offset(bit_offset: int, bits_per_byte: int = DEFAULT_BITS_PER_BYTE) -> int:
    return bit_offset // bits_per_byte


def bit_index(bit_offset: int, bits_per_byte: int = DEFAULT_BITS_PER_BYTE) -> int:
    return bit_offset % bits_per_byte


def alloc_units(n_units: int, bits_per_byte: int = DEFAULT_BITS_PER_BYTE) -> np.ndarray:
    """Zeroed buffer of n_units elements of the given width."""
    if bits_per_byte not in SUPPORTED_WIDTHS:
        raise ValueError(f"Unsupported unit width: {bits_per_byte}")
    return np.zeros(n_units, dtype=SUPPORTED_WIDTHS[bits_per_byte])


def as_units(buffer, bits_per_byte: int = DEFAULT_BITS_PER_BYTE) -> np.ndarray:
    """
    View `buffer` as a 1D array of unsigned units without copying.
    bytes/bytearray/memoryview are accepted for 8-bit units only
    (a bytearray view stays writable).
    """
    if bits_per_byte not in SUPPORTED_WIDTHS:
        raise ValueError(f"Unsupported unit width: {bits_per_byte}")
    if isinstance(buffer, np.ndarray):
        if buffer.ndim != 1 or buffer.dtype.kind != "u" or buffer.dtype.itemsize * 8 != bits_per_byte:
            raise ValueError(
                f"Buffer must be a 1D array of {bits_per_byte}-bit unsigned units, got {buffer.dtype} ndim={buffer.ndim}"
            )
        return buffer
    if bits_per_byte != 8:
        raise ValueError("Byte strings can only be addressed with 8-bit units")
    return np.frombuffer(buffer, dtype=np.uint8)


class BitView:
    """
    Flat MSB-first bit addressing over a caller-owned buffer, plus a write
    cursor. The view never grows the buffer; callers size it up front.
    """

    def __init__(self, buffer, bits_per_byte: int = DEFAULT_BITS_PER_BYTE, n_bytes: int = None):
        self.units = as_units(buffer, bits_per_byte)
        self.bits_per_byte = bits_per_byte
        if n_bytes is None:
            n_bytes = self.units.size
        if not (0 <= n_bytes <= self.units.size):
            raise ValueError(f"n_bytes={n_bytes} outside buffer of {self.units.size} units")
        self.n_bytes = n_bytes
        self.offset = 0

    @property
    def nbits(self) -> int:
        return self.n_bytes * self.bits_per_byte

    def bytes_used(self, bit_offset: int = None) -> int:
        """Units touched up to bit_offset (default: the cursor), rounded up."""
        if bit_offset is None:
            bit_offset = self.offset
        return -(-bit_offset // self.bits_per_byte)

    def _locate(self, bit_offset: int):
        w = self.bits_per_byte
        return byte_offset(bit_offset, w), bit_mask(bit_index(bit_offset, w), w)

    def get_bit(self, bit_offset: int) -> int:
        i, mask = self._locate(bit_offset)
        return 1 if int(self.units[i]) & mask else 0

    def set_bit(self, bit_offset: int, value: int):
        i, mask = self._locate(bit_offset)
        cur = int(self.units[i])
        self.units[i] = (cur | mask) if value else (cur & ~mask)

    def set_run(self, bit_offset: int, value: int, count: int) -> int:
        """Set `count` bits from bit_offset to value; return the offset after the run."""
        for k in range(count):
            self.set_bit(bit_offset + k, value)
        return bit_offset + count

    def emit(self, value: int, count: int) -> int:
        """set_run at the cursor, advancing it."""
        self.offset = self.set_run(self.offset, value, count)
        return self.offset

    def run_length(self, bit_offset: int) -> int:
        """
        Length of the run of identical bits starting at bit_offset.
        0 when bit_offset is at or past the end of the view.
        """
        end = self.nbits
        if bit_offset >= end:
            return 0
        first = self.get_bit(bit_offset)
        k = bit_offset + 1
        while k < end and self.get_bit(k) == first:
            k += 1
        return k - bit_offset

    def any_set(self, bit_offset: int) -> bool:
        """True if any 1 bit lies at or after bit_offset within the view."""
        if bit_offset >= self.nbits:
            return False
        w = self.bits_per_byte
        i = byte_offset(bit_offset, w)
        tail_mask = (1 << (w - bit_index(bit_offset, w))) - 1
        if int(self.units[i]) & tail_mask:
            return True
        return bool(np.any(self.units[i + 1:self.n_bytes]))

    def to_bits(self, nbits: int = None) -> np.ndarray:
        """Unpack the first nbits (default: whole view) into a uint8 0/1 array."""
        if nbits is None:
            nbits = self.nbits
        units = self.units[:self.n_bytes]
        if self.bits_per_byte == 8:
            return np.unpackbits(units)[:nbits]
        shifts = np.arange(self.bits_per_byte - 1, -1, -1, dtype=units.dtype)
        bits = (units[:, None] >> shifts) & units.dtype.type(1)
        return bits.astype(np.uint8).ravel()[:nbits]


def run_length(buffer, n_bytes: int, bit_offset: int, bits_per_byte: int = DEFAULT_BITS_PER_BYTE) -> int:
    return BitView(buffer, bits_per_byte, n_bytes).run_length(bit_offset)
