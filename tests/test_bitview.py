import numpy as np
import pytest

from bitview import BitView, alloc_units, bit_index, bit_mask, byte_offset, run_length


def test_bit_mask_any_width():
    assert bit_mask(0) == 0x80
    assert bit_mask(2) == 0x20
    assert bit_mask(7) == 0x01
    assert bit_mask(0, 16) == 0x8000
    assert bit_mask(2, 16) == 0x2000
    assert bit_mask(0, 64) == 1 << 63


def test_offset_decomposition():
    assert (byte_offset(13), bit_index(13)) == (1, 5)
    assert (byte_offset(13, 16), bit_index(13, 16)) == (0, 13)
    assert (byte_offset(16, 16), bit_index(16, 16)) == (1, 0)


def test_get_bit_msb_first():
    bv = BitView(bytearray([0xB1, 0xC7]))
    bits = [bv.get_bit(k) for k in range(16)]
    assert bits == [1, 0, 1, 1, 0, 0, 0, 1, 1, 1, 0, 0, 0, 1, 1, 1]


def test_set_bit_touches_one_bit():
    buf = bytearray([0b10100101])
    bv = BitView(buf)
    bv.set_bit(1, 1)
    assert buf[0] == 0b11100101
    bv.set_bit(0, 0)
    assert buf[0] == 0b01100101
    bv.set_bit(7, 1)
    assert buf[0] == 0b01100101


def test_set_run_returns_next_offset_and_crosses_units():
    buf = bytearray(2)
    bv = BitView(buf)
    off = bv.set_run(6, 1, 4)
    assert off == 10
    assert buf == bytearray([0x03, 0xC0])
    off = bv.set_run(off - 2, 0, 1)
    assert off == 9
    assert buf == bytearray([0x03, 0x40])


def test_emit_advances_cursor():
    buf = alloc_units(1)
    bv = BitView(buf)
    bv.emit(1, 3)
    bv.emit(0, 1)
    bv.emit(1, 1)
    assert bv.offset == 5
    assert int(buf[0]) == 0b11101000
    assert bv.bytes_used() == 1


def test_sixteen_bit_units():
    buf = alloc_units(2, 16)
    bv = BitView(buf, 16)
    bv.set_run(14, 1, 4)
    assert buf.dtype == np.uint16
    assert buf.tolist() == [0x0003, 0xC000]
    assert bv.nbits == 32
    assert bv.bytes_used(17) == 2


def test_run_length():
    data = bytearray([0xF0, 0xFF, 0x80])
    assert run_length(data, 3, 0) == 4
    assert run_length(data, 3, 4) == 4
    assert run_length(data, 3, 8) == 9
    assert run_length(data, 3, 17) == 7
    assert run_length(data, 3, 24) == 0
    assert run_length(data, 3, 100) == 0


def test_run_length_stops_at_n_bytes():
    data = bytearray([0xFF, 0xFF])
    assert run_length(data, 1, 0) == 8
    assert run_length(data, 1, 8) == 0


def test_any_set():
    bv = BitView(bytearray([0x00, 0x01, 0x00]))
    assert bv.any_set(0)
    assert bv.any_set(15)
    assert not bv.any_set(16)
    assert not bv.any_set(24)
    assert not BitView(bytearray([0x80, 0x00]), n_bytes=2).any_set(1)


def test_to_bits():
    assert BitView(bytearray([0xA0])).to_bits().tolist() == [1, 0, 1, 0, 0, 0, 0, 0]
    assert BitView(bytearray([0xA0, 0xFF]), n_bytes=1).to_bits().size == 8
    assert BitView(bytearray([0xFF, 0x01])).to_bits(10).tolist() == [1] * 8 + [0, 0]


@pytest.mark.parametrize("width", [16, 64])
def test_to_bits_wide_units(width):
    buf = alloc_units(2, width)
    bv = BitView(buf, width)
    bv.set_run(width - 2, 1, 3)
    bits = bv.to_bits()
    assert bits.dtype == np.uint8
    assert bits.size == 2 * width
    assert np.flatnonzero(bits).tolist() == [width - 2, width - 1, width]
    assert bits.tolist() == [bv.get_bit(k) for k in range(2 * width)]


def test_rejects_mismatched_buffers():
    with pytest.raises(ValueError):
        BitView(np.zeros(2, dtype=np.uint8), 16)
    with pytest.raises(ValueError):
        BitView(bytearray(2), 16)
    with pytest.raises(ValueError):
        alloc_units(4, 12)
    with pytest.raises(ValueError):
        BitView(bytearray(2), n_bytes=3)
