import pytest

from alphabet_and_permutation import Alphabet, Permutation
from errors import InvalidConfiguration
from utilities import (
    GREEK,
    REFLECTORS,
    ROTORS,
    group_blocks,
    historical_config,
    preprocess_message,
    wiring_to_cycles,
)


def test_wiring_to_cycles_rotor_i():
    assert wiring_to_cycles(ROTORS["I"][0]) == \
        "(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ)"


def test_wiring_to_cycles_small():
    assert wiring_to_cycles("BCAD", "ABCD") == "(ABC)"
    assert wiring_to_cycles("ABCD", "ABCD") == ""


def test_wiring_must_be_a_permutation():
    with pytest.raises(InvalidConfiguration):
        wiring_to_cycles("AACD", "ABCD")


@pytest.mark.parametrize("wiring", [w for w, _ in ROTORS.values()] + list(GREEK.values()))
def test_cycles_reproduce_wiring(wiring):
    alpha = Alphabet()
    perm = Permutation(wiring_to_cycles(wiring), alpha)
    assert "".join(perm.permute_symbol(c) for c in alpha.chars) == wiring


@pytest.mark.parametrize("name", sorted(REFLECTORS))
def test_reflectors_are_fixed_point_free_involutions(name):
    perm = Permutation(wiring_to_cycles(REFLECTORS[name]), Alphabet())
    assert perm.derangement()
    assert all(len(c) == 2 for c in perm.cycles())


def test_historical_models():
    m4 = historical_config("M4")
    assert (m4.num_rotors, m4.pawls) == (5, 3)
    kinds = {s.name: s.kind for s in m4.rotors}
    assert kinds["Beta"] == kinds["Gamma"] == "N"
    assert kinds["B"] == kinds["C"] == "R"
    assert kinds["VIII"] == "M"

    m3 = historical_config("m3")
    assert (m3.num_rotors, m3.pawls) == (4, 3)
    assert "Beta" not in {s.name for s in m3.rotors}

    with pytest.raises(InvalidConfiguration):
        historical_config("M5")


def test_preprocess_message():
    assert preprocess_message("From his shoulder", "ABCDEFGHIJKLMNOPQRSTUVWXYZ") == \
        "FROMHISSHOULDER"
    assert preprocess_message("ab c", "abcABC") == "abc"
    assert preprocess_message("A1 B", "AB") == "A1B"


def test_group_blocks():
    assert group_blocks("QVPQSOKOILPUBKJZPISFXDW") == "QVPQS OKOIL PUBKJ ZPISF XDW"
    assert group_blocks("ABCDE") == "ABCDE"
    assert group_blocks("ABCDEFG", 3) == "ABC DEF G"
    assert group_blocks("") == ""
