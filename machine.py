# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import InvalidConfiguration, UnknownIdentifier
from rotor_and_reflector import Rotor


class Machine:
    """A rotor machine with NUM_ROTORS slots and PAWLS stepping rotors.

    Slot 0 holds the reflector and slot ``num_rotors - 1`` the fast rotor.
    The rightmost PAWLS slots hold moving rotors; the slots between the
    reflector and those hold non-moving rotors. ALL_ROTORS is the catalog
    :meth:`insert_rotors` draws from by name.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        pawls: int,
        all_rotors: Iterable[Rotor],
    ) -> None:
        if num_rotors < 2:
            raise InvalidConfiguration(
                f"A machine needs at least 2 rotor slots, not {num_rotors}"
            )
        if not (0 <= pawls < num_rotors):
            raise InvalidConfiguration(
                f"Pawl count {pawls} must be in 0–{num_rotors - 1}"
            )

        self.alphabet = alphabet
        self._num_rotors = num_rotors
        self._pawls = pawls

        self._all_rotors: Dict[str, Rotor] = {}
        for rotor in all_rotors:
            if rotor.name in self._all_rotors:
                raise InvalidConfiguration(f"Rotor {rotor.name} defined twice")
            if rotor.alphabet != alphabet:
                raise InvalidConfiguration(
                    f"Rotor {rotor.name} is wired for a different alphabet"
                )
            self._all_rotors[rotor.name] = rotor

        self._rotors: List[Rotor] = []
        self._plugboard = Permutation("", alphabet)

    # ── queries ─────────────────────────────────────────────────

    def num_rotors(self) -> int:
        return self._num_rotors

    def num_pawls(self) -> int:
        return self._pawls

    def get_rotor(self, k: int) -> Rotor:
        """Rotor #K; #0 is the reflector, #(num_rotors-1) the fast rotor."""
        self._require_rotors()
        return self._rotors[k]

    def available_rotors(self) -> Dict[str, Rotor]:
        return dict(self._all_rotors)

    def plugboard(self) -> Permutation:
        return self._plugboard

    def window(self) -> str:
        """The letters currently showing, leftmost rotor first."""
        return "".join(
            self.alphabet.to_symbol(r.setting()) for r in self._rotors[1:]
        )

    # ── setup ───────────────────────────────────────────────────

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Bind the rotors called NAMES to my slots (NAMES[0] is the reflector)."""
        self._rotors = self._resolve(names)

    def set_rotors(self, setting: str) -> None:
        """Set rotors 1.. from SETTING, leftmost first, one symbol each."""
        self._require_rotors()
        self._check_positions(setting, "Setting")
        for rotor, ch in zip(self._rotors[1:], setting):
            rotor.set(ch)

    def set_rings(self, rings: str) -> None:
        """Apply ring offsets to rotors 1.., leftmost first, one symbol each."""
        self._require_rotors()
        self._check_positions(rings, "Ring setting")
        for rotor, ch in zip(self._rotors[1:], rings):
            rotor.set_ring(ch)

    def set_plugboard(self, plugboard: Permutation) -> None:
        if plugboard.alphabet != self.alphabet:
            raise InvalidConfiguration("Plugboard uses a different alphabet")
        self._plugboard = plugboard

    def setup(
        self,
        names: Sequence[str],
        setting: str,
        plugboard: str | Permutation = "",
        rings: str | None = None,
        trace: Debug | None = None,
    ) -> None:
        """Configure the machine for one message group.

        Every argument is validated before any slot or rotor is touched, so
        a failed setup leaves the previous configuration in place.
        """
        rotors = self._resolve(names)
        self._check_positions(setting, "Setting")
        if rings is None:
            rings = self.alphabet.to_symbol(0) * (self._num_rotors - 1)
        self._check_positions(rings, "Ring setting")
        if isinstance(plugboard, str):
            plugboard = Permutation(plugboard, self.alphabet)
        elif plugboard.alphabet != self.alphabet:
            raise InvalidConfiguration("Plugboard uses a different alphabet")

        self._rotors = rotors
        self.set_rings(rings)
        self.set_rotors(setting)
        self.set_plugboard(plugboard)

        if trace:
            trace.log("setup", "rotors=%s window=%s rings=%s plugboard=%s",
                      " ".join(r.name for r in rotors), setting, rings, plugboard)

    # ── conversion ──────────────────────────────────────────────

    def convert(self, c: int, trace: Debug | None = None) -> int:
        """Advance the rotors, then encipher the index C."""
        self._require_rotors()
        self._advance_rotors()
        if trace:
            trace.log("stepping", "[%s]", self.window())

        symbol_in = c
        c = self._plugboard.permute(c)
        plugged_in = c
        if trace:
            trace.log("plugboard", "%s -> %s", self._sym(symbol_in), self._sym(c))

        c = self._apply_rotors(c, trace)
        routed = c
        c = self._plugboard.permute(c)

        if trace:
            trace.log("plugboard", "%s -> %s", self._sym(routed), self._sym(c))
            trace.log("encipher", "[%s] %s -> %s -> %s -> %s", self.window(),
                      self._sym(symbol_in), self._sym(plugged_in),
                      self._sym(routed), self._sym(c))
        return c

    def convert_message(self, msg: str, trace: Debug | None = None) -> str:
        """Encipher MSG symbol by symbol, stepping the rotors as it goes."""
        self._require_rotors()
        signals = [self.alphabet.to_index(ch) for ch in msg]
        return "".join(
            self.alphabet.to_symbol(self.convert(c, trace)) for c in signals
        )

    # ── stepping logic  ─────────────────────────────────────────

    def _advance_rotors(self) -> None:
        """One key press: double-stepping carry, then the fast rotor.

        Notch states are read for every stepping slot before anything
        moves, and no rotor moves more than once.
        """
        last = self._num_rotors - 1
        first = self._num_rotors - self._pawls
        if self._pawls == 0:
            return

        notched = {i: self._rotors[i].at_notch() for i in range(first, last + 1)}
        turned: set[int] = set()

        for i in range(last, first, -1):
            if not notched[i]:
                continue
            left = self._rotors[i - 1]
            if left.rotates() and i - 1 not in turned:
                left.advance()
                turned.add(i - 1)
                if i != last and i not in turned:
                    self._rotors[i].advance()
                    turned.add(i)

        if last not in turned:
            self._rotors[last].advance()

    def _apply_rotors(self, c: int, trace: Debug | None) -> int:
        for rotor in reversed(self._rotors):
            out = rotor.convert_forward(c)
            if trace:
                trace.log("rotor", "%s fwd %s -> %s",
                          rotor.name, self._sym(c), self._sym(out))
            c = out

        for rotor in self._rotors[1:]:
            out = rotor.convert_backward(c)
            if trace:
                trace.log("rotor", "%s bwd %s -> %s",
                          rotor.name, self._sym(c), self._sym(out))
            c = out
        return c

    # ── validation helpers ──────────────────────────────────────

    def _resolve(self, names: Sequence[str]) -> List[Rotor]:
        if len(names) != self._num_rotors:
            raise InvalidConfiguration(
                f"Need exactly {self._num_rotors} rotor names, got {len(names)}"
            )
        if len(set(names)) != len(names):
            raise InvalidConfiguration(f"Rotor used twice in {' '.join(names)}")

        rotors: List[Rotor] = []
        for name in names:
            try:
                rotors.append(self._all_rotors[name])
            except KeyError:
                raise UnknownIdentifier(f"Bad rotor name: {name}") from None

        if not rotors[0].reflecting():
            raise InvalidConfiguration(f"{rotors[0].name} is not a reflector")

        first_moving = self._num_rotors - self._pawls
        for slot, rotor in enumerate(rotors[1:], start=1):
            if rotor.reflecting():
                raise InvalidConfiguration(
                    f"Reflector {rotor.name} in wrong place (slot {slot})"
                )
            if rotor.rotates() != (slot >= first_moving):
                raise InvalidConfiguration(
                    f"Wrong number of moving rotors: {self._pawls} pawls "
                    f"but {sum(r.rotates() for r in rotors)} moving rotors, "
                    f"{rotor.name} in slot {slot}"
                )
        return rotors

    def _check_positions(self, letters: str, what: str) -> None:
        need = self._num_rotors - 1
        if len(letters) != need:
            raise InvalidConfiguration(
                f"{what} {letters!r} must be exactly {need} symbols"
            )
        for ch in letters:
            if not self.alphabet.contains(ch):
                raise InvalidConfiguration(
                    f"{what} symbol {ch!r} is not in the alphabet"
                )

    def _require_rotors(self) -> None:
        if not self._rotors:
            raise InvalidConfiguration("No rotors inserted")

    def _sym(self, c: int) -> str:
        return self.alphabet.to_symbol(c % self.alphabet.size())

    def __repr__(self) -> str:
        names = " ".join(r.name for r in self._rotors) or "empty"
        return f"<Machine {names} window={self.window() or '-'}>"
