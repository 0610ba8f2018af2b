from typing import Dict, Optional, Tuple, Union

# AR prosign (end of message) is keyed by NUL
END_OF_MESSAGE = "\0"

CODE_TABLE: Tuple[Tuple[str, str], ...] = (
    ("A", ".-"),
    ("B", "-..."),
    ("C", "-.-."),
    ("D", "-.."),
    ("E", "."),
    ("F", "..-."),
    ("G", "--."),
    ("H", "...."),
    ("I", ".."),
    ("J", ".---"),
    ("K", "-.-"),
    ("L", ".-.."),
    ("M", "--"),
    ("N", "-."),
    ("O", "---"),
    ("P", ".--."),
    ("Q", "--.-"),
    ("R", ".-."),
    ("S", "..."),
    ("T", "-"),
    ("U", "..-"),
    ("V", "...-"),
    ("W", ".--"),
    ("X", "-..-"),
    ("Y", "-.--"),
    ("Z", "--.."),

    ("1", ".----"),
    ("2", "..---"),
    ("3", "...--"),
    ("4", "....-"),
    ("5", "....."),
    ("6", "-...."),
    ("7", "--..."),
    ("8", "---.."),
    ("9", "----."),
    ("0", "-----"),

    (END_OF_MESSAGE, ".-.-."),
)

_TO_MORSE: Dict[str, str] = dict(CODE_TABLE)
_TO_CHAR: Dict[str, str] = {code: c for c, code in CODE_TABLE}

if len(_TO_CHAR) != len(CODE_TABLE):
    raise ValueError("Morse code table has duplicate codes")

MAX_CODE_LEN = max(len(code) for _, code in CODE_TABLE)


def char_to_morse(c: Union[str, int]) -> Optional[str]:
    """Dot/dash string for c (a 1-char str or a byte value), None if unmapped.

    Lookup is exact: lowercase letters are not folded here.
    """
    if isinstance(c, int):
        c = chr(c)
    return _TO_MORSE.get(c)


def morse_to_char(code: str) -> Optional[str]:
    """Character whose code equals `code` exactly, None otherwise."""
    return _TO_CHAR.get(code)
