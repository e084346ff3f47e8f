# config_reader.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import InvalidConfiguration
from machine import Machine
from rotor_and_reflector import FixedRotor, MovingRotor, Reflector, Rotor

# ────────────────────────────────────────────────────────────────────────
#  0. Regex & records
# ────────────────────────────────────────────────────────────────────────

_cycle_re = re.compile(r"^\([^*()\s]*\)$")
_type_re = re.compile(r"^([MNR])(\S*)$")

KINDS = {"M": "moving rotor", "N": "fixed rotor", "R": "reflector"}


@dataclass(slots=True)
class RotorSpec:
    """One catalog entry: name, type tag, notches (moving only), cycles."""

    name: str
    kind: str
    notches: str = ""
    cycles: str = ""


@dataclass(slots=True)
class MachineConfig:
    alphabet: str
    num_rotors: int
    pawls: int
    rotors: List[RotorSpec] = field(default_factory=list)

    def build_machine(self) -> Machine:
        alpha = Alphabet(self.alphabet)
        return Machine(
            alpha,
            self.num_rotors,
            self.pawls,
            [make_rotor(spec, alpha) for spec in self.rotors],
        )


@dataclass(slots=True)
class Settings:
    """A parsed ``* B Beta III IV I AXLE [RING] (YF) (ZH)`` line."""

    rotors: List[str]
    setting: str
    rings: str | None = None
    plugboard: str = ""

    def apply(self, machine: Machine, trace: Debug | None = None) -> None:
        machine.setup(self.rotors, self.setting, self.plugboard, self.rings, trace)


def make_rotor(spec: RotorSpec, alphabet: Alphabet) -> Rotor:
    perm = Permutation(spec.cycles, alphabet)
    if spec.kind == "M":
        return MovingRotor(spec.name, perm, spec.notches)
    if spec.notches:
        raise InvalidConfiguration(
            f"Only moving rotors have notches ({spec.name} is a {KINDS.get(spec.kind, spec.kind)})"
        )
    if spec.kind == "N":
        return FixedRotor(spec.name, perm)
    if spec.kind == "R":
        return Reflector(spec.name, perm)
    raise InvalidConfiguration(f"Bad rotor type {spec.kind!r} for {spec.name}")


# ────────────────────────────────────────────────────────────────────────
#  1. Machine description
# ────────────────────────────────────────────────────────────────────────


def read_config(text: str) -> MachineConfig:
    """Parse the plain-text machine description.

    The first token is the alphabet, then the slot and pawl counts, then
    any number of rotor descriptors ``NAME TYPE[NOTCHES] (cycle) ...``.
    """
    tokens = text.split()
    if len(tokens) < 3:
        raise InvalidConfiguration("configuration file truncated")

    alphabet, num_rotors, pawls = tokens[0], _int(tokens[1]), _int(tokens[2])
    rest = tokens[3:]

    specs: List[RotorSpec] = []
    i = 0
    while i < len(rest):
        name = rest[i]
        if name.startswith("(") or i + 1 >= len(rest):
            raise InvalidConfiguration(f"bad rotor description near {name!r}")
        m = _type_re.match(rest[i + 1])
        if not m:
            raise InvalidConfiguration(f"bad rotor type {rest[i + 1]!r} for {name}")
        kind, notches = m.groups()
        i += 2

        cycles: List[str] = []
        while i < len(rest) and rest[i].startswith("("):
            if not _cycle_re.match(rest[i]):
                raise InvalidConfiguration(f"bad cycle {rest[i]!r} in rotor {name}")
            cycles.append(rest[i])
            i += 1
        specs.append(RotorSpec(name, kind, notches, " ".join(cycles)))

    return MachineConfig(alphabet, num_rotors, pawls, specs)


def read_json_config(text: str) -> MachineConfig:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(f"bad JSON configuration: {e}") from None
    if not isinstance(data, dict):
        raise InvalidConfiguration("JSON configuration must be an object")

    required = {"alphabet", "rotors", "pawls", "catalog"}
    missing = required - data.keys()
    if missing:
        raise InvalidConfiguration(f"Missing keys in config: {', '.join(sorted(missing))}")

    if not isinstance(data["alphabet"], str):
        raise InvalidConfiguration(f"alphabet must be a string, got {data['alphabet']!r}")
    if not isinstance(data["catalog"], list):
        raise InvalidConfiguration("catalog must be a list of rotor entries")

    specs = []
    for entry in data["catalog"]:
        if not isinstance(entry, dict) or not {"name", "type"} <= entry.keys():
            raise InvalidConfiguration(f"bad catalog entry {entry!r}")
        fields = (entry["name"], entry["type"],
                  entry.get("notches", ""), entry.get("cycles", ""))
        if not all(isinstance(f, str) for f in fields):
            raise InvalidConfiguration(f"catalog entry fields must be strings: {entry!r}")
        specs.append(RotorSpec(*fields))

    return MachineConfig(
        data["alphabet"], _int(data["rotors"]), _int(data["pawls"]), specs
    )


def load_config(path: str | Path) -> MachineConfig:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return read_json_config(text)
    return read_config(text)


def _int(raw) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"expected a number, got {raw!r}") from None


# ────────────────────────────────────────────────────────────────────────
#  2. Settings lines
# ────────────────────────────────────────────────────────────────────────


def parse_settings(line: str, num_rotors: int) -> Settings:
    tokens = line.split()
    if not tokens or tokens[0] != "*":
        raise InvalidConfiguration(f"settings line must start with '*': {line!r}")
    if len(tokens) < num_rotors + 2:
        raise InvalidConfiguration(f"settings line truncated: {line!r}")

    names = tokens[1 : num_rotors + 1]
    setting = tokens[num_rotors + 1]
    if setting.startswith("("):
        raise InvalidConfiguration(f"missing rotor setting in {line!r}")

    rest = tokens[num_rotors + 2 :]
    rings = None
    if rest and not rest[0].startswith("("):
        rings = rest.pop(0)
    return Settings(names, setting, rings, " ".join(rest))
