# alphabet_and_permutation.py
from __future__ import annotations

import string
from typing import Dict, List

from errors import IndexOutOfRange, InvalidConfiguration, InvalidSymbol

RESERVED = "*()"


# ── Alphabet ──────────────────────────────────────────────────────
class Alphabet:
    """An ordered set of symbols, the K-th symbol having index K."""

    def __init__(self, chars: str = string.ascii_uppercase) -> None:
        self.chars: str = chars
        self.char_to_index: Dict[str, int] = {}

        for i, ch in enumerate(chars):
            if ch in RESERVED:
                raise InvalidConfiguration(
                    f"Reserved character {ch!r} cannot be in an alphabet"
                )
            if ch in self.char_to_index:
                raise InvalidConfiguration(f"Repeated character {ch!r} in alphabet")
            self.char_to_index[ch] = i

    def size(self) -> int:
        return len(self.chars)

    def contains(self, ch: str) -> bool:
        return ch in self.char_to_index

    # symbol → integer signal
    def to_index(self, ch: str) -> int:
        try:
            return self.char_to_index[ch]
        except KeyError:
            raise InvalidSymbol(
                f"Invalid character {ch!r} for current alphabet."
            ) from None

    # integer signal → symbol
    def to_symbol(self, index: int) -> str:
        if not (0 <= index < len(self.chars)):
            hi = len(self.chars) - 1
            raise IndexOutOfRange(f"Index {index} out of range 0–{hi}")
        return self.chars[index]

    __len__ = size
    __contains__ = contains

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Alphabet) and other.chars == self.chars

    def __hash__(self) -> int:
        return hash(self.chars)

    def __repr__(self) -> str:
        return f"<Alphabet {self.chars!r}>"


# ── Permutation ───────────────────────────────────────────────────
class Permutation:
    """A permutation of the indices of ALPHABET given in cycle notation.

    ``Permutation("(ABD) (CE)", alpha)`` maps A→B→D→A and C→E→C; every
    symbol not named in a cycle maps to itself. Whitespace between the
    parenthesised groups is ignored.
    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        self.alphabet: Alphabet = alphabet
        self._cycles: List[str] = []

        seen: set[str] = set()
        for cycle in _split_cycles(cycles):
            for ch in cycle:
                if ch in RESERVED:
                    raise InvalidConfiguration(
                        f"Reserved character {ch!r} in cycle ({cycle})"
                    )
                if not alphabet.contains(ch):
                    raise InvalidConfiguration(
                        f"Cycle member {ch!r} is not in the alphabet"
                    )
                if ch in seen:
                    raise InvalidConfiguration(
                        f"Character {ch!r} appears in more than one cycle"
                    )
                seen.add(ch)
            self._cycles.append(cycle)

        # unmentioned symbols are fixed points
        self._cycles.extend(ch for ch in alphabet.chars if ch not in seen)

        # integer lookup tables
        n = alphabet.size()
        self._fwd = list(range(n))
        self._rev = list(range(n))
        for cycle in self._cycles:
            idx = [alphabet.to_index(ch) for ch in cycle]
            for here, there in zip(idx, idx[1:] + idx[:1]):
                self._fwd[here] = there
                self._rev[there] = here

    def size(self) -> int:
        return self.alphabet.size()

    def wrap(self, p: int) -> int:
        """Return P reduced into 0..size-1."""
        return p % self.size()

    # ── index paths ───────────────────────────────────────────────
    def permute(self, p: int) -> int:
        return self._fwd[self.wrap(p)]

    def invert(self, c: int) -> int:
        return self._rev[self.wrap(c)]

    # ── symbol paths ──────────────────────────────────────────────
    def permute_symbol(self, ch: str) -> str:
        return self.alphabet.to_symbol(self.permute(self.alphabet.to_index(ch)))

    def invert_symbol(self, ch: str) -> str:
        return self.alphabet.to_symbol(self.invert(self.alphabet.to_index(ch)))

    def derangement(self) -> bool:
        """True iff no symbol maps to itself."""
        return all(len(cycle) > 1 for cycle in self._cycles)

    def cycles(self) -> List[str]:
        """All cycles, fixed points included as one-symbol cycles."""
        return list(self._cycles)

    def __repr__(self) -> str:
        shown = " ".join(f"({c})" for c in self._cycles if len(c) > 1)
        return f"<Permutation {shown or 'identity'}>"


def _split_cycles(cycles: str) -> List[str]:
    """Split ``"(AB) (CDE)"`` into ``["AB", "CDE"]``, checking the brackets."""
    found: List[str] = []
    current: List[str] | None = None

    for ch in cycles:
        if ch == "(":
            if current is not None:
                raise InvalidConfiguration(f"Nested '(' in cycles {cycles!r}")
            current = []
        elif ch == ")":
            if current is None:
                raise InvalidConfiguration(f"Unbalanced ')' in cycles {cycles!r}")
            if current:
                found.append("".join(current))
            current = None
        elif current is not None:
            if ch.isspace():
                raise InvalidConfiguration(f"Whitespace inside a cycle in {cycles!r}")
            current.append(ch)
        elif not ch.isspace():
            raise InvalidConfiguration(
                f"Character {ch!r} outside parentheses in {cycles!r}"
            )

    if current is not None:
        raise InvalidConfiguration(f"Unclosed '(' in cycles {cycles!r}")
    return found
