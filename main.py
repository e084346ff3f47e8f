# main.py
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, TextIO

from config_reader import MachineConfig, load_config, parse_settings
from debug import COMPONENTS, Debug
from errors import EnigmaError, InvalidConfiguration
from machine import Machine
from utilities import MODELS, group_blocks, historical_config, preprocess_message

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration
# ────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class Config:
    """Runtime switches that influence output and tracing."""

    verbose: bool = False           # one trace line per converted symbol
    block: int = 5                  # output group size
    trace: List[str] = field(default_factory=list)   # extra Debug components

    def make_debug(self) -> Debug | None:
        components = list(self.trace)
        if self.verbose:
            components += ["stepping", "encipher"]
        return Debug(*components) if components else None


# ────────────────────────────────────────────────────────────────────────
#  1. Message processing
# ────────────────────────────────────────────────────────────────────────


def process(
    machine: Machine,
    lines: Iterable[str],
    out: TextIO,
    cfg: Config,
    trace: Debug | None = None,
) -> None:
    """Run LINES through MACHINE: ``*`` lines reconfigure it, blank lines
    are copied, every other line is converted and written in groups."""
    configured = False
    for raw in lines:
        line = raw.rstrip("\r\n")
        if line.lstrip().startswith("*"):
            parse_settings(line, machine.num_rotors()).apply(machine, trace)
            configured = True
        elif not line.strip():
            out.write("\n")
        else:
            if not configured:
                raise InvalidConfiguration("input must start with a settings line")
            msg = preprocess_message(line, machine.alphabet.chars)
            out.write(group_blocks(machine.convert_message(msg, trace), cfg.block) + "\n")


def build_machine(config_path: str | None, model: str) -> Machine:
    cfg: MachineConfig = load_config(config_path) if config_path else historical_config(model)
    return cfg.build_machine()


# ────────────────────────────────────────────────────────────────────────
#  2. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt with a rotor machine")
    p.add_argument("input", nargs="?", help="Messages to convert (default: stdin)")
    p.add_argument("output", nargs="?", help="Where to write results (default: stdout)")
    p.add_argument("--config", metavar="FILE", help="Machine description (.conf text or .json). Default: built-in historical wheels.")
    p.add_argument("--model", choices=sorted(MODELS), default="M4", help="Historical machine used when no --config is given. Default: M4")
    p.add_argument("--verbose", action="store_true", help="Trace every converted symbol on stderr")
    p.add_argument("--trace", action="append", choices=COMPONENTS, default=[], metavar="COMPONENT", help=f"Extra trace component ({', '.join(COMPONENTS)}); repeatable")
    p.add_argument("--block", type=int, default=5, help="Output group size. Default: 5")
    return p.parse_args(argv)


def _read_lines(name: str | None) -> List[str]:
    if name is None:
        return sys.stdin.readlines()
    try:
        return Path(name).read_text(encoding="utf-8").splitlines()
    except OSError:
        raise EnigmaError(f"could not open {name}") from None


# ────────────────────────────────────────────────────────────────────────
#  3. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    if args.block < 1:
        sys.exit("Error: --block must be positive")

    cfg = Config(verbose=args.verbose, block=args.block, trace=args.trace)
    try:
        machine = build_machine(args.config, args.model)
        lines = _read_lines(args.input)
        trace = cfg.make_debug()

        if args.output is None:
            process(machine, lines, sys.stdout, cfg, trace)
            return
        try:
            with open(args.output, "w", encoding="utf-8") as out:
                process(machine, lines, out, cfg, trace)
        except OSError:
            raise EnigmaError(f"could not open {args.output}") from None
    except (OSError, EnigmaError) as e:
        sys.exit(f"Error: {e}")


if __name__ == "__main__":
    main()
