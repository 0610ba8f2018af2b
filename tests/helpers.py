from bitview import BitView

AR = "1011101011101000"


def pack_bits(bits: str) -> bytearray:
    """'1011...' -> MSB-first bytes, zero-padded to a whole byte."""
    out = bytearray(-(-len(bits) // 8))
    for k, b in enumerate(bits):
        if b == "1":
            out[k // 8] |= 0x80 >> (k % 8)
    return out


def bit_string(units, bits_per_byte: int = 8) -> str:
    bits = BitView(units, bits_per_byte).to_bits()
    return "".join(str(int(b)) for b in bits)
