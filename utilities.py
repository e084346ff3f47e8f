# utilities.py
from __future__ import annotations

import string
from typing import Dict, List, Tuple

from config_reader import MachineConfig, RotorSpec
from errors import InvalidConfiguration

Alpha26 = string.ascii_uppercase

# ────────────────────────────────────────────────────────────────────────
#  0. Wiring helpers
# ────────────────────────────────────────────────────────────────────────


def wiring_to_cycles(wiring: str, alphabet: str = Alpha26) -> str:
    """Turn a wiring string (``wiring[i]`` is where ``alphabet[i]`` goes)
    into cycle notation, leaving fixed points out."""
    if sorted(wiring) != sorted(alphabet):
        raise InvalidConfiguration("wiring must be a permutation of alphabet")

    seen: set[str] = set()
    cycles: List[str] = []
    for start in alphabet:
        cycle = []
        ch = start
        while ch not in seen:
            seen.add(ch)
            cycle.append(ch)
            ch = wiring[alphabet.index(ch)]
        if len(cycle) > 1:
            cycles.append("(" + "".join(cycle) + ")")
    return " ".join(cycles)


# ────────────────────────────────────────────────────────────────────────
#  1. Text preprocessing & output
# ────────────────────────────────────────────────────────────────────────


def preprocess_message(msg: str, alpha: str) -> str:
    """Drop whitespace and upper-case letters the alphabet only has in
    upper case. Anything else is passed through for the machine to reject."""
    out = []
    for ch in msg:
        if ch.isspace():
            continue
        if ch not in alpha and ch.upper() in alpha:
            ch = ch.upper()
        out.append(ch)
    return "".join(out)


def group_blocks(text: str, block: int = 5) -> str:
    """``"QVPQSOKOIL"`` → ``"QVPQS OKOIL"``; the last group may be shorter."""
    return " ".join(text[i : i + block] for i in range(0, len(text), block))


# ────────────────────────────────────────────────────────────────────────
#  2. Wheel database
# ────────────────────────────────────────────────────────────────────────

# name: (wiring, notches)
ROTORS: Dict[str, Tuple[str, str]] = {
    "I":    ("EKMFLGDQVZNTOWYHXUSPAIBRCJ", "Q"),
    "II":   ("AJDKSIRUXBLHWTMCQGZNPYFVOE", "E"),
    "III":  ("BDFHJLCPRTXVZNYEIWGAKMUSQO", "V"),
    "IV":   ("ESOVPZJAYQUIRHXLNFTGKDCMWB", "J"),
    "V":    ("VZBRGITYUPSDNHLXAWMJQOFECK", "Z"),
    "VI":   ("JPGVOUMFYQBENHZRDKASXLICTW", "ZM"),
    "VII":  ("NZJHGRCXMYSWBOUFAIVLPEKQDT", "ZM"),
    "VIII": ("FKQHTLXOCBJSPDZRAMEWNIUYGV", "ZM"),
}

# M4 fourth-position wheels; they never step
GREEK: Dict[str, str] = {
    "Beta":  "LEYJVCNIXWPBQMDRTAKZGFUHOS",
    "Gamma": "FSOKANUERHMBTPYCQJDILWGVZX",
}

REFLECTORS: Dict[str, str] = {
    "B":      "YRUHQSLDPXNGOKMIEBFZCWVJAT",
    "C":      "FVPJIAOYEDRZXWGCTKUQSBNMHL",
    "B-thin": "ENKQAUYWJICOPBLMDXZVFTHRGS",
    "C-thin": "RDOBJNTKVEHMLFCWZAXGYIPSUQ",
}

# model: (slots, pawls, {catalog name: REFLECTORS key})
MODELS: Dict[str, Tuple[int, int, Dict[str, str]]] = {
    "M3": (4, 3, {"B": "B", "C": "C"}),
    "M4": (5, 3, {"B": "B-thin", "C": "C-thin"}),
}


def historical_config(model: str = "M4") -> MachineConfig:
    """Catalog and slot layout of a wartime machine.

    ``M4`` is the naval four-rotor machine (thin reflectors named ``B`` and
    ``C``, plus ``Beta`` and ``Gamma``); ``M3`` the three-rotor Enigma I.
    """
    try:
        slots, pawls, reflectors = MODELS[model.upper()]
    except KeyError:
        raise InvalidConfiguration(
            f"Unknown model '{model}'. Expected one of {list(MODELS)}"
        ) from None

    specs = [
        RotorSpec(name, "M", notches, wiring_to_cycles(wiring))
        for name, (wiring, notches) in ROTORS.items()
    ]
    if slots > 4:
        specs += [
            RotorSpec(name, "N", "", wiring_to_cycles(wiring))
            for name, wiring in GREEK.items()
        ]
    specs += [
        RotorSpec(name, "R", "", wiring_to_cycles(REFLECTORS[key]))
        for name, key in reflectors.items()
    ]
    return MachineConfig(Alpha26, slots, pawls, specs)


__all__ = [
    "Alpha26",
    "GREEK",
    "MODELS",
    "REFLECTORS",
    "ROTORS",
    "group_blocks",
    "historical_config",
    "preprocess_message",
    "wiring_to_cycles",
]
