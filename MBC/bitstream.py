import struct

import numpy as np

from bitview import SUPPORTED_WIDTHS

MAGIC = b"MRSE"   # 4 bytes
VERSION = 1       # 1 byte

# Header (little-endian):
# magic(4) version(1) bits_per_byte(1) reserved(u16) n_units(u32)
HEADER_FMT = "<4sBBHI"
HEADER_SIZE = struct.calcsize(HEADER_FMT)

# payload unit width -> on-disk little-endian dtype
PAYLOAD_DTYPES = {8: "<u1", 16: "<u2", 32: "<u4", 64: "<u8"}


def write_header(f, *, bits_per_byte, n_units):
    if bits_per_byte not in SUPPORTED_WIDTHS:
        raise ValueError(f"Unsupported unit width: {bits_per_byte}")
    data = struct.pack(HEADER_FMT, MAGIC, VERSION, bits_per_byte, 0, n_units)
    f.write(data)


def read_header(f):
    data = f.read(HEADER_SIZE)
    if len(data) != HEADER_SIZE:
        raise ValueError("Malformed stream: header too short")
    magic, ver, bits_per_byte, _, n_units = struct.unpack(HEADER_FMT, data)
    if magic != MAGIC:
        raise ValueError("Bad magic number (not MRSE)")
    if ver != VERSION:
        raise ValueError(f"Unsupported version: {ver}")
    if bits_per_byte not in SUPPORTED_WIDTHS:
        raise ValueError(f"Unsupported unit width: {bits_per_byte}")
    return {
        "bits_per_byte": bits_per_byte,
        "n_units": n_units,
    }


def write_payload(f, units: np.ndarray, bits_per_byte: int):
    units.astype(PAYLOAD_DTYPES[bits_per_byte]).tofile(f)


def read_payload(f, h) -> np.ndarray:
    w, n = h["bits_per_byte"], h["n_units"]
    raw = f.read(n * (w // 8))
    if len(raw) != n * (w // 8):
        raise ValueError("Malformed stream: payload too short")
    # native-order copy so BitView sees plain unsigned units
    return np.frombuffer(raw, dtype=PAYLOAD_DTYPES[w]).astype(SUPPORTED_WIDTHS[w])


def save_message(path, units: np.ndarray, bits_per_byte: int):
    with open(path, "wb") as f:
        write_header(f, bits_per_byte=bits_per_byte, n_units=units.size)
        write_payload(f, units, bits_per_byte)


def load_message(path):
    """Returns (header dict, payload units)."""
    with open(path, "rb") as f:
        h = read_header(f)
        units = read_payload(f, h)
    return h, units
