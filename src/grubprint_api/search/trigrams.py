"""
Trigram tokenizer.

Shared by index construction and querying; both sides must produce
identical gram sets for overlap counts to be meaningful.

Each word is windowed three characters at a time. The window starts
filled with PAD so the first two characters yield padded grams, and
after the last character one more gram is emitted with a trailing
BOUNDARY so word endings match regardless of what follows:

    "pie" -> {"\\x00\\x00p", "\\x00pi", "pie", "ie "}
"""

PAD = "\x00"
BOUNDARY = " "
GRAM_SIZE = 3


def _keep(ch: str) -> bool:
    return ch.isalpha() or ch.isdecimal() or ch.isspace()


def normalize(text: str) -> str:
    """Lower-case text and delete everything but letters, digits and whitespace.

    Deleted characters do not split words: "o'brien" becomes "obrien".
    Lower-casing comes first, so marks it produces (the dot of "İ") are
    deleted along with other punctuation.
    """
    return "".join(ch for ch in text.lower() if _keep(ch))


def word_trigrams(word: str) -> list[str]:
    """Return the grams for one already-normalized word, in emit order."""
    window = PAD * GRAM_SIZE
    grams = []
    for ch in word:
        window = window[1:] + ch
        grams.append(window)
    grams.append(window[1:] + BOUNDARY)
    return grams


def trigrams(text: str) -> frozenset[str]:
    """
    Compute the trigram set of a text.

    Args:
        text: Arbitrary input, e.g. a food description or a user query

    Returns:
        Distinct grams; empty when text has no letters or digits
    """
    grams: set[str] = set()
    for word in normalize(text).split():
        grams.update(word_trigrams(word))
    return frozenset(grams)
