import string


ALPHABET = string.ascii_lowercase
ALPHABET_SIZE = len(ALPHABET)
ALL_LETTERS_MASK = (1 << ALPHABET_SIZE) - 1

# letter -> single-bit mask, 'a' is bit 0
LETTER_BITS = {letter: 1 << i for i, letter in enumerate(ALPHABET)}

# ASCII letters of either case; no case folding of non-ASCII input
_CHAR_BITS = dict(LETTER_BITS)
_CHAR_BITS.update((letter.upper(), bit) for letter, bit in LETTER_BITS.items())


def encode(text: str) -> int:
    """
    Encode a string as a 26-bit letter-presence set.

    Bit i is set iff the i-th letter of the alphabet appears in `text`
    (case-insensitive). Anything that is not an ASCII letter contributes
    nothing, so anagrams and repeated-letter variants share a code.
    """
    code = 0
    for char in text:
        code |= _CHAR_BITS.get(char, 0)
    return code


def letters_of(code: int) -> str:
    """Decode a letter set back to its letters in alphabetical order."""
    return "".join(letter for letter, bit in LETTER_BITS.items() if code & bit)
