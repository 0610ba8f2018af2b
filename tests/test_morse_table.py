from morse_table import CODE_TABLE, END_OF_MESSAGE, MAX_CODE_LEN, char_to_morse, morse_to_char


def test_letters_and_digits():
    assert char_to_morse("S") == "..."
    assert char_to_morse("O") == "---"
    assert char_to_morse("0") == "-----"
    assert char_to_morse(ord("Q")) == "--.-"


def test_end_of_message_is_ar():
    assert char_to_morse(END_OF_MESSAGE) == ".-.-."
    assert morse_to_char(".-.-.") == END_OF_MESSAGE


def test_unmapped_characters():
    assert char_to_morse("a") is None
    assert char_to_morse(" ") is None
    assert char_to_morse(",") is None


def test_reverse_lookup_is_exact():
    assert morse_to_char("...") == "S"
    assert morse_to_char("..") == "I"
    assert morse_to_char("..--") is None
    assert morse_to_char("") is None


def test_table_shape():
    chars = [c for c, _ in CODE_TABLE]
    codes = [code for _, code in CODE_TABLE]
    assert len(CODE_TABLE) == 37
    assert len(set(chars)) == len(chars)
    assert len(set(codes)) == len(codes)
    assert all(set(code) <= {".", "-"} for code in codes)
    assert MAX_CODE_LEN == 5
