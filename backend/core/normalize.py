import re
from typing import FrozenSet

# A normalized exercise name: sorted, de-duplicated lowercase tokens joined by
# single spaces. Equal keys mean "same exercise" for analytics.
NormKey = str

_SEPARATORS = re.compile(r"[-_/()\[\]]")
_NON_ALNUM = re.compile(r"[^\w\s]")


def name_tokens(text: str) -> FrozenSet[str]:
    """Token set of an exercise name; parenthetical words are kept."""
    t = text.lower()
    t = _SEPARATORS.sub(" ", t)
    t = _NON_ALNUM.sub("", t)
    return frozenset(t.split())


def normalize(text: str) -> NormKey:
    """
    Canonicalize a free-text exercise name.

    Word order, repeated qualifiers, case and punctuation do not matter, so
    "Bench Press (Barbell)" and "Barbell Bench Press" share a key.
    """
    return " ".join(sorted(name_tokens(text)))


def same_name(a: str, b: str) -> bool:
    return normalize(a) == normalize(b)
