import pytest

from alphabet_and_permutation import Alphabet, Permutation
from errors import EnigmaError, IndexOutOfRange, InvalidConfiguration, InvalidSymbol
from rotor_and_reflector import FixedRotor, MovingRotor, Reflector
from utilities import REFLECTORS, ROTORS, wiring_to_cycles

UPPER = Alphabet()


def rotor_i():
    wiring, notches = ROTORS["I"]
    return MovingRotor("I", Permutation(wiring_to_cycles(wiring), UPPER), notches)


def test_capabilities():
    perm = Permutation("(AB)", Alphabet("AB"))
    moving = MovingRotor("M", perm, "A")
    fixed = FixedRotor("N", perm)
    refl = Reflector("R", perm)

    assert moving.rotates() and not moving.reflecting()
    assert not fixed.rotates() and not fixed.reflecting()
    assert not refl.rotates() and refl.reflecting()
    assert not fixed.at_notch() and not refl.at_notch()
    assert fixed.notches() == "" and moving.notches() == "A"


def test_set_by_index_or_symbol():
    r = rotor_i()
    r.set("C")
    assert r.setting() == 2
    r.set(25)
    assert r.setting() == 25
    with pytest.raises(IndexOutOfRange):
        r.set(26)
    with pytest.raises(InvalidSymbol):
        r.set("a")


def test_convert_at_zero_follows_wiring():
    r = rotor_i()
    wiring = ROTORS["I"][0]
    for i, ch in enumerate(UPPER.chars):
        out = r.convert_forward(i)
        assert UPPER.to_symbol(out) == wiring[i]
        assert r.convert_backward(out) == i


def test_convert_shifts_by_setting():
    r = rotor_i()
    r.set("B")
    # contact A meets wiring B -> K, seen one step back as J
    assert UPPER.to_symbol(r.convert_forward(0)) == "J"
    assert r.convert_backward(UPPER.to_index("J")) == 0


def test_ring_offsets_wiring_against_setting():
    r = rotor_i()
    r.set("B")
    r.set_ring("B")
    # same wiring seen as at A/A
    assert UPPER.to_symbol(r.convert_forward(0)) == "E"
    assert r.setting() == 1


def test_moving_rotor_advances_and_wraps():
    r = rotor_i()
    r.set("Z")
    r.advance()
    assert r.setting() == 0
    r.advance()
    assert r.setting() == 1


def test_at_notch_tracks_setting():
    r = rotor_i()
    r.set("P")
    assert not r.at_notch()
    r.advance()
    assert r.at_notch()
    r.advance()
    assert not r.at_notch()


def test_several_notches():
    wiring, notches = ROTORS["VI"]
    r = MovingRotor("VI", Permutation(wiring_to_cycles(wiring), UPPER), notches)
    hits = []
    for _ in range(UPPER.size()):
        if r.at_notch():
            hits.append(UPPER.to_symbol(r.setting()))
        r.advance()
    assert sorted(hits) == ["M", "Z"]


def test_bad_notch():
    with pytest.raises(InvalidConfiguration):
        MovingRotor("X", Permutation("", Alphabet("ABC")), "D")


def test_fixed_rotor_cannot_advance():
    r = FixedRotor("Beta", Permutation("(AB)", Alphabet("ABC")))
    r.set("C")
    assert r.setting() == 2
    with pytest.raises(EnigmaError):
        r.advance()


def test_reflector_rules():
    refl = Reflector("B", Permutation(wiring_to_cycles(REFLECTORS["B"]), UPPER))
    refl.set(0)
    refl.set("A")
    assert refl.setting() == 0
    with pytest.raises(InvalidConfiguration):
        refl.set("B")
    with pytest.raises(EnigmaError):
        refl.convert_backward(0)
    with pytest.raises(EnigmaError):
        refl.advance()


def test_reflector_needs_derangement():
    with pytest.raises(InvalidConfiguration):
        Reflector("bad", Permutation("(AB)", Alphabet("ABC")))
