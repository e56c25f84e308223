# settings_generator.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from random import Random, SystemRandom
from typing import List, Tuple

from errors import EnigmaError, InvalidConfiguration
from utilities import MachineConfig, Settings, load_config

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return *k* disjoint plug pairs."""
    max_possible = len(alpha) // 2
    k = min(k, max_possible)
    pool = list(alpha)
    rng.shuffle(pool)
    return [a + b for a, b in zip(pool[::2], pool[1::2])][:k]


def choose_rotors(config: MachineConfig, rng: Random | SystemRandom) -> Tuple[str, ...]:
    """Reflector first, then non-moving rotors, then one moving rotor per pawl."""
    reflectors = [r.name for r in config.rotors if r.reflecting]
    moving = [r.name for r in config.rotors if r.rotates]
    others = [r.name for r in config.rotors if not r.reflecting and not r.rotates]

    n_free = config.num_rotors - 1 - config.num_pawls
    if not reflectors:
        raise InvalidConfiguration("Configuration has no reflector")
    if len(moving) < config.num_pawls:
        raise InvalidConfiguration(
            f"Need {config.num_pawls} moving rotors, configuration has {len(moving)}"
        )

    driven = rng.sample(moving, config.num_pawls)
    spare = others + [m for m in moving if m not in driven]
    if len(spare) < n_free:
        raise InvalidConfiguration(
            f"Need {config.num_rotors - 1} rotors besides the reflector, "
            f"configuration has {len(moving) + len(others)}"
        )
    # fixed rotors sit to the left of the driven ones
    left = rng.sample(spare, n_free)
    return (rng.choice(reflectors), *left, *driven)


def generate_settings(
    config: MachineConfig,
    rng: Random | SystemRandom,
    *,
    plugs: int = 10,
    rings: bool = False,
) -> Settings:
    alpha = config.alphabet.chars
    n = config.num_rotors - 1
    names = choose_rotors(config, rng)
    offsets = "".join(rng.choices(alpha, k=n))
    ring_set = "".join(rng.choices(alpha, k=n)) if rings else None
    plugboard = " ".join(f"({p})" for p in choose_pairs(alpha, plugs, rng))
    return Settings(names, offsets, ring_set, plugboard)


def parse_cli(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a random settings line for a machine configuration")
    p.add_argument("config", type=Path, help="Machine configuration file")
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument("--plugs", type=int, default=10, help="Number of plugboard pairs (default: 10)")
    p.add_argument("--rings", action="store_true", help="Also choose ring settings")
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> None:
    args = parse_cli(argv)
    try:
        config = load_config(args.config)
        settings = generate_settings(config, build_rng(args.seed),
                                     plugs=args.plugs, rings=args.rings)
    except (OSError, UnicodeDecodeError):
        sys.exit(f"Error: could not open {args.config}")
    except EnigmaError as excp:
        sys.exit(f"Error: {excp}")
    print(settings)


if __name__ == "__main__":
    main()
