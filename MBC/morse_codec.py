from enum import Enum
from typing import List

import numpy as np

from bitview import DEFAULT_BITS_PER_BYTE, BitView, alloc_units
from morse_table import CODE_TABLE, END_OF_MESSAGE, MAX_CODE_LEN, char_to_morse, morse_to_char

# Timing model, in bits
DOT_UNITS = 1
DASH_UNITS = 3
SYMBOL_GAP = 1
LETTER_GAP = 3
WORD_GAP = 7

_MARKS = {".": DOT_UNITS, "-": DASH_UNITS}
_SYMBOLS = {DOT_UNITS: ".", DASH_UNITS: "-"}

_ALNUM = frozenset(b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789")


def code_bits(code: str) -> int:
    """Bits spent on one character: marks, symbol gaps and the trailing letter gap."""
    return sum(_MARKS[s] + SYMBOL_GAP for s in code) + (LETTER_GAP - SYMBOL_GAP)


_MAX_CHAR_BITS = max(code_bits(code) for c, code in CODE_TABLE if c != END_OF_MESSAGE)
_EOM_BITS = code_bits(char_to_morse(END_OF_MESSAGE))


def max_encoded_units(n_text: int, bits_per_byte: int = DEFAULT_BITS_PER_BYTE) -> int:
    """Worst-case buffer size for encoding n_text input bytes (AR included)."""
    # a separator run costs WORD_GAP - LETTER_GAP bits, less than any character
    nbits = n_text * _MAX_CHAR_BITS + _EOM_BITS
    return -(-nbits // bits_per_byte)


def max_decoded_len(n_units: int, bits_per_byte: int = DEFAULT_BITS_PER_BYTE) -> int:
    """Upper bound on decoded characters (NUL excluded) for n_units of input."""
    # every character but the last needs at least one mark bit and one gap bit
    return n_units * bits_per_byte // 2 + 1


class MorseDecodeError(ValueError):
    """Bitstream cannot be decoded. kind is one of MALFORMED_RUN, UNRESOLVABLE_CODE, OVERSIZED_CODE."""

    MALFORMED_RUN = "malformed-run"
    UNRESOLVABLE_CODE = "unresolvable-code"
    OVERSIZED_CODE = "oversized-code"

    def __init__(self, kind: str, bit_offset: int, detail: str):
        super().__init__(f"Malformed stream: {detail} (bit {bit_offset})")
        self.kind = kind
        self.bit_offset = bit_offset


# ---------------- encoder ----------------

def _text_bytes(text) -> bytes:
    if isinstance(text, str):
        # non-ASCII -> '?', which is a separator
        return text.encode("ascii", errors="replace")
    return bytes(text)


def _emit_code(bv: BitView, code: str):
    for s in code:
        bv.emit(1, _MARKS[s])
        bv.emit(0, SYMBOL_GAP)
    bv.emit(0, LETTER_GAP - SYMBOL_GAP)


def text_to_morse(text, morse, bits_per_byte: int = DEFAULT_BITS_PER_BYTE) -> int:
    """
    Encode text into morse[], which must be zeroed and at least
    max_encoded_units(len(text)) units long. Leading non-alphanumerics are
    dropped, every later run of them becomes one word gap, and the output
    ends with the AR prosign (also emitted early on a NUL byte).

    Returns the number of units used within morse[].
    """
    data = _text_bytes(text)
    bv = BitView(morse, bits_per_byte)
    n = len(data)

    i = 0
    while i < n and data[i] not in _ALNUM:
        i += 1

    while True:
        c = chr(data[i]).upper() if i < n else END_OF_MESSAGE
        code = char_to_morse(c)
        if code is not None:
            _emit_code(bv, code)
            if c == END_OF_MESSAGE:
                break
            i += 1
        else:
            bv.emit(0, WORD_GAP - LETTER_GAP)
            i += 1
            while i < n and data[i] not in _ALNUM:
                i += 1

    return bv.bytes_used()


def encode(text, bits_per_byte: int = DEFAULT_BITS_PER_BYTE) -> np.ndarray:
    """Encode text into a freshly sized buffer; returns the used units."""
    data = _text_bytes(text)
    morse = alloc_units(max_encoded_units(len(data), bits_per_byte), bits_per_byte)
    used = text_to_morse(data, morse, bits_per_byte)
    return morse[:used].copy()


# ---------------- decoder ----------------

class DecodeState(Enum):
    ACCUMULATING_SYMBOL = "accumulating"
    AT_LETTER_BOUNDARY = "letter"
    AT_WORD_BOUNDARY = "word"
    DONE = "done"
    ERROR = "error"


class Gap(Enum):
    SYMBOL = "symbol"
    LETTER = "letter"
    WORD = "word"
    END = "end"


def classify_gap(length: int) -> Gap:
    if length == 0:
        return Gap.END
    if length == LETTER_GAP:
        return Gap.LETTER
    if length >= WORD_GAP:
        return Gap.WORD
    # 1 is the normal symbol gap; 2, 4, 5, 6 are read the same way
    return Gap.SYMBOL


class MorseDecoder:
    """
    Run-driven state machine over one BitView. Each mark run adds a symbol
    to the pending code; the zero run after it (classified by classify_gap)
    decides whether the character is complete.
    """

    def __init__(self, bv: BitView):
        self.bv = bv
        self.state = DecodeState.AT_LETTER_BOUNDARY
        self.code: List[str] = []
        self.out: List[str] = []

    def _fail(self, kind: str, bit_offset: int, detail: str):
        self.state = DecodeState.ERROR
        raise MorseDecodeError(kind, bit_offset, detail)

    def _push_symbol(self, mark: int, bit_offset: int):
        sym = _SYMBOLS.get(mark)
        if sym is None:
            self._fail(MorseDecodeError.MALFORMED_RUN, bit_offset, f"mark of {mark} bits")
        self.code.append(sym)
        if len(self.code) > MAX_CODE_LEN:
            self._fail(MorseDecodeError.OVERSIZED_CODE, bit_offset,
                       f"code {''.join(self.code)} longer than {MAX_CODE_LEN} symbols")
        # a word boundary stays pending until its next character resolves
        if self.state != DecodeState.AT_WORD_BOUNDARY:
            self.state = DecodeState.ACCUMULATING_SYMBOL

    def _resolve(self, bit_offset: int):
        """Turn the pending code into output; AR finishes the message."""
        if not self.code:
            return
        code = "".join(self.code)
        c = morse_to_char(code)
        if c is None:
            self._fail(MorseDecodeError.UNRESOLVABLE_CODE, bit_offset, f"unknown code {code}")
        self.code = []
        if c == END_OF_MESSAGE:
            self.state = DecodeState.DONE
            return
        # a word gap only becomes a space once another character follows it
        if self.state == DecodeState.AT_WORD_BOUNDARY:
            self.out.append(" ")
        self.out.append(c)
        self.state = DecodeState.AT_LETTER_BOUNDARY

    def run(self) -> str:
        bv = self.bv
        pos = 0
        if bv.nbits and bv.get_bit(0) == 0:
            pos = bv.run_length(0)

        while self.state != DecodeState.DONE:
            mark = bv.run_length(pos)
            if mark == 0:
                # no more marks; a code cut off after a short gap is dropped
                break
            self._push_symbol(mark, pos)
            pos += mark

            gap_len = bv.run_length(pos)
            gap_at = pos
            pos += gap_len
            gap = classify_gap(gap_len)

            if gap == Gap.SYMBOL:
                continue
            self._resolve(gap_at)
            if self.state == DecodeState.DONE:
                break
            if gap == Gap.LETTER:
                continue
            if gap == Gap.WORD and bv.any_set(pos):
                self.state = DecodeState.AT_WORD_BOUNDARY
                continue
            # trailing silence, or the last mark ran into the end of the buffer
            break

        self.state = DecodeState.DONE
        return "".join(self.out)


def decode(morse, n_bytes: int = None, bits_per_byte: int = DEFAULT_BITS_PER_BYTE) -> str:
    """Decode the first n_bytes units of morse[] (default: all). Raises MorseDecodeError."""
    return MorseDecoder(BitView(morse, bits_per_byte, n_bytes)).run()


def morse_to_text(morse, n_bytes: int, text: bytearray, bits_per_byte: int = DEFAULT_BITS_PER_BYTE) -> int:
    """
    Decode morse[0:n_bytes] into text[] as NUL-terminated ASCII.
    Returns the number of characters written (NUL excluded), or -1 if the
    stream cannot be decoded.
    """
    try:
        s = decode(morse, n_bytes, bits_per_byte)
    except MorseDecodeError:
        return -1
    data = s.encode("ascii")
    if len(text) < len(data) + 1:
        raise ValueError(f"text buffer too small: need {len(data) + 1}, got {len(text)}")
    text[:len(data)] = data
    text[len(data)] = 0
    return len(data)
