# settings_generator.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from random import Random, SystemRandom
from typing import List

from config_reader import MachineConfig, load_config
from errors import EnigmaError, InvalidConfiguration
from utilities import MODELS, historical_config

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return up to *k* disjoint plugboard cycles like ``"(AB)"``."""
    k = min(k, len(alpha) // 2)
    pool = list(alpha)
    rng.shuffle(pool)
    return [f"({a}{b})" for a, b in zip(pool[::2], pool[1::2])][:k]


def choose_rotors(cfg: MachineConfig, rng: Random | SystemRandom) -> List[str]:
    """Reflector, then the non-moving slots, then the moving slots."""
    by_kind = {kind: [s.name for s in cfg.rotors if s.kind == kind] for kind in "RNM"}
    need = {"R": 1, "N": cfg.num_rotors - 1 - cfg.pawls, "M": cfg.pawls}

    for kind, count in need.items():
        if len(by_kind[kind]) < count:
            raise InvalidConfiguration(
                f"Need {count} rotors of type {kind}, catalog has {len(by_kind[kind])}"
            )
    return [name for kind in "RNM" for name in rng.sample(by_kind[kind], need[kind])]


def generate_settings(
    cfg: MachineConfig,
    rng: Random | SystemRandom,
    pairs: int = 10,
    rings: bool = False,
) -> str:
    """Return one random, valid ``*`` settings line for *cfg*."""
    alpha = cfg.alphabet
    parts = ["*", *choose_rotors(cfg, rng)]
    parts.append("".join(rng.choices(alpha, k=cfg.num_rotors - 1)))
    if rings:
        parts.append("".join(rng.choices(alpha, k=cfg.num_rotors - 1)))
    parts += choose_pairs(alpha, pairs, rng)
    return " ".join(parts)


def parse_cli(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate random settings lines")
    p.add_argument("--config", metavar="FILE", help="Machine description (default: built-in historical wheels)")
    p.add_argument("--model", choices=sorted(MODELS), default="M4", help="Historical machine when no --config is given")
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument("--pairs", type=int, default=10, help="Plugboard pairs (default: 10)")
    p.add_argument("--rings", action="store_true", help="Also draw a ring setting")
    p.add_argument("--count", type=int, default=1, help="How many lines (default: 1)")
    p.add_argument(
        "--outfile",
        type=Path,
        help="Destination file (stdout if omitted)",
    )
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> None:
    args = parse_cli(argv)
    if args.pairs < 0:
        sys.exit("Error: --pairs must not be negative")
    rng = build_rng(args.seed)

    try:
        cfg = load_config(args.config) if args.config else historical_config(args.model)
        # validates the catalog before drawing from it
        cfg.build_machine()
        lines = [generate_settings(cfg, rng, args.pairs, args.rings)
                 for _ in range(args.count)]
        text = "\n".join(lines) + "\n"
        if args.outfile:
            args.outfile.write_text(text, encoding="utf-8")
        else:
            sys.stdout.write(text)
    except (OSError, EnigmaError) as e:
        sys.exit(f"Error: {e}")


if __name__ == "__main__":
    main()
