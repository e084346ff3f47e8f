# rotor_and_reflector.py
from __future__ import annotations

from alphabet_and_permutation import Alphabet, Permutation
from errors import EnigmaError, IndexOutOfRange, InvalidConfiguration


class Rotor:
    """A named wheel: a fixed wiring PERM seen through a rotating offset.

    The base class never moves; :class:`MovingRotor` steps and has notches,
    :class:`Reflector` turns the signal around at slot 0.
    """

    def __init__(self, name: str, perm: Permutation) -> None:
        self.name: str = name
        self.permutation: Permutation = perm
        self.alphabet: Alphabet = perm.alphabet
        self.size: int = perm.size()
        self._setting = 0
        self.ring = 0

    # ── capabilities ──────────────────────────────────────────────
    def rotates(self) -> bool:
        return False

    def reflecting(self) -> bool:
        return False

    def at_notch(self) -> bool:
        return False

    def notches(self) -> str:
        return ""

    # ── position ──────────────────────────────────────────────────
    def setting(self) -> int:
        return self._setting

    def set(self, posn: int | str) -> None:
        """Set my position to POSN, an index or a symbol of my alphabet."""
        self._setting = self._position(posn)

    def set_ring(self, posn: int | str) -> None:
        """Offset my wiring against my setting (Ringstellung)."""
        self.ring = self._position(posn)

    def advance(self) -> None:
        raise EnigmaError(f"Rotor {self.name} does not advance")

    def _position(self, posn: int | str) -> int:
        if isinstance(posn, str):
            return self.alphabet.to_index(posn)
        if not (0 <= posn < self.size):
            raise IndexOutOfRange(
                f"Position {posn} out of range 0–{self.size - 1} for rotor {self.name}"
            )
        return posn

    # ── signal paths ──────────────────────────────────────────────
    def convert_forward(self, p: int) -> int:
        """Map contact P right-to-left through my wiring."""
        shift = self._setting - self.ring
        mapped = self.permutation.permute(p + shift)
        return self.permutation.wrap(mapped - shift)

    def convert_backward(self, e: int) -> int:
        """Map contact E left-to-right through my wiring."""
        shift = self._setting - self.ring
        mapped = self.permutation.invert(e + shift)
        return self.permutation.wrap(mapped - shift)

    def __repr__(self) -> str:
        return (f"<{type(self).__name__} {self.name} "
                f"pos={self.alphabet.to_symbol(self._setting)}>")


class FixedRotor(Rotor):
    """A rotor that can be set by hand but is never stepped."""


class Reflector(Rotor):
    """Slot-0 rotor: the signal enters, is reflected, and never comes back."""

    def __init__(self, name: str, perm: Permutation) -> None:
        if not perm.derangement():
            raise InvalidConfiguration(
                f"Reflector {name} wiring must have no fixed points"
            )
        super().__init__(name, perm)

    def reflecting(self) -> bool:
        return True

    def set(self, posn: int | str) -> None:
        if self._position(posn) != 0:
            raise InvalidConfiguration(f"Reflector {self.name} has only one position")

    def set_ring(self, posn: int | str) -> None:
        if self._position(posn) != 0:
            raise InvalidConfiguration(f"Reflector {self.name} has no ring")

    def convert_backward(self, e: int) -> int:
        raise EnigmaError(f"Reflector {self.name} only converts forward")


class MovingRotor(Rotor):
    """A stepping rotor; NOTCHES are the positions that carry to the left."""

    def __init__(self, name: str, perm: Permutation, notches: str) -> None:
        super().__init__(name, perm)
        bad = [ch for ch in notches if not self.alphabet.contains(ch)]
        if bad:
            raise InvalidConfiguration(
                f"Notch {bad[0]!r} of rotor {name} is not in the alphabet"
            )
        self._notches = notches
        self._notch_index = frozenset(self.alphabet.to_index(ch) for ch in notches)

    def rotates(self) -> bool:
        return True

    def at_notch(self) -> bool:
        return self._setting in self._notch_index

    def notches(self) -> str:
        return self._notches

    def advance(self) -> None:
        self._setting = (self._setting + 1) % self.size