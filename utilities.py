# utilities.py
from __future__ import annotations

import re
from collections.abc import Iterable
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import InvalidConfiguration, MalformedCycle
from machine import Machine
from rotor_and_reflector import Rotor, RotorKind

# ────────────────────────────────────────────────────────────────────────
#  0. Regexes
# ────────────────────────────────────────────────────────────────────────

_counts_re = re.compile(r"^(\d+)\s+(\d+)$")
_cycles = r"(?:\([^()\s]*\)\s*)+"
_rotor_re = re.compile(rf"^([^\s()*]+)\s+([MNR])(\S*)\s+({_cycles})$")
_continued_re = re.compile(rf"^{_cycles}$")
_symbols_re = re.compile(r"\(([^()\s]*)\)")

BLOCK = 5


# ────────────────────────────────────────────────────────────────────────
#  1. Parsed structures
# ────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class MachineConfig:
    """Everything a configuration file describes."""

    alphabet: Alphabet
    num_rotors: int
    num_pawls: int
    rotors: Tuple[Rotor, ...]

    def rotor_names(self) -> List[str]:
        return [r.name for r in self.rotors]

    def build_machine(self, debug: Debug | None = None) -> Machine:
        """Return a machine with its own copies of the rotors."""
        rotors = deepcopy(list(self.rotors))
        return Machine(self.alphabet, self.num_rotors, self.num_pawls, rotors, debug)


@dataclass(frozen=True)
class Settings:
    """One ``*`` line: rotor order, window letters, rings and plug cycles."""

    rotors: Tuple[str, ...]
    offsets: str
    rings: str | None = None
    plugboard: str = ""

    def apply(self, machine: Machine) -> None:
        machine.setup(self.rotors, self.offsets, self.plugboard, self.rings)

    def __str__(self) -> str:
        parts = ["*", *self.rotors, self.offsets]
        if self.rings:
            parts.append(self.rings)
        if self.plugboard:
            parts.append(self.plugboard)
        return " ".join(parts)


# ────────────────────────────────────────────────────────────────────────
#  2. Configuration file
# ────────────────────────────────────────────────────────────────────────


def _lines(source: str | Path | Iterable[str]) -> List[str]:
    if isinstance(source, (str, Path)):
        return Path(source).read_text(encoding="utf-8").splitlines()
    return [line.rstrip("\n") for line in source]


def check_disjoint(cycles: str, taken: str = "") -> None:
    """Raise MalformedCycle if a symbol appears twice across CYCLES and TAKEN."""
    seen = set(taken)
    for body in _symbols_re.findall(cycles):
        for ch in body:
            if ch in seen:
                raise MalformedCycle(cycles, f"symbol {ch!r} appears in more than one cycle")
            seen.add(ch)


def parse_counts(line: str) -> Tuple[int, int]:
    m = _counts_re.match(line.strip())
    if not m:
        raise InvalidConfiguration(f"Expected 'ROTORS PAWLS', got {line.strip()!r}")
    num_rotors, num_pawls = int(m.group(1)), int(m.group(2))
    if num_pawls < 1 or num_pawls >= num_rotors:
        raise InvalidConfiguration(
            f"Invalid number of rotors or pawls: {num_rotors} {num_pawls}"
        )
    return num_rotors, num_pawls


def parse_rotor(line: str, alphabet: Alphabet) -> Rotor:
    """Build a rotor from ``NAME KIND[NOTCHES] (cycles)...``."""
    m = _rotor_re.match(line.strip())
    if not m:
        raise InvalidConfiguration(f"Bad rotor description: {line.strip()!r}")
    name, kind, notches, cycles = m.groups()
    if notches and kind != "M":
        raise InvalidConfiguration(f"Rotor {name!r}: only moving rotors have notches")
    check_disjoint(cycles)
    return Rotor(name, Permutation(cycles, alphabet), RotorKind(kind), notches)


def load_config(
    source: str | Path | Iterable[str], debug: Debug | None = None
) -> MachineConfig:
    """Read a configuration file (a path, or an iterable of lines).

    Line 1 is the alphabet, line 2 ``ROTORS PAWLS``, then one rotor per
    line. A line holding only cycles continues the previous rotor.
    """
    lines = [ln for ln in _lines(source) if ln.strip()]
    if len(lines) < 2:
        raise InvalidConfiguration("Configuration needs an alphabet and counts line")

    alphabet = Alphabet(lines[0].strip())
    num_rotors, num_pawls = parse_counts(lines[1])

    rotors: Dict[str, Rotor] = {}
    last: Rotor | None = None
    for raw in lines[2:]:
        line = raw.strip()
        if _continued_re.match(line):
            if last is None:
                raise InvalidConfiguration(f"Cycles with no rotor to extend: {line!r}")
            check_disjoint(line, "".join(last.permutation.cycles))
            last.permutation.add_cycle(line)
            continue
        last = parse_rotor(line, alphabet)
        if last.name in rotors:
            raise InvalidConfiguration(f"Rotor {last.name!r} defined twice")
        rotors[last.name] = last
        if debug is not None:
            debug.log("config", "rotor %s kind=%s notches=%s",
                      last.name, last.kind.name, "".join(sorted(last.notches)))

    if debug is not None:
        debug.log("config", "alphabet=%s rotors=%d pawls=%d catalog=%d",
                  alphabet.chars, num_rotors, num_pawls, len(rotors))
    return MachineConfig(alphabet, num_rotors, num_pawls, tuple(rotors.values()))


# ────────────────────────────────────────────────────────────────────────
#  3. Settings line
# ────────────────────────────────────────────────────────────────────────


def is_settings_line(line: str) -> bool:
    return line.lstrip().startswith("*")


def parse_settings(line: str, num_rotors: int) -> Settings:
    """Split ``* B III IV I AXL [RINGS] (AB) (CD)`` into its parts."""
    text = line.strip()
    if not text.startswith("*"):
        raise InvalidConfiguration(f"Settings line must start with '*': {text!r}")

    tokens = text[1:].split()
    words: List[str] = []
    for tok in tokens:
        if tok.startswith("("):
            break
        words.append(tok)
    plugboard = " ".join(tokens[len(words):])
    check_disjoint(plugboard)

    if len(words) not in (num_rotors + 1, num_rotors + 2):
        raise InvalidConfiguration(
            f"Settings need {num_rotors} rotor names and a position string: {text!r}"
        )
    names = tuple(words[:num_rotors])
    offsets = words[num_rotors]
    rings = words[num_rotors + 1] if len(words) == num_rotors + 2 else None
    return Settings(names, offsets, rings, plugboard)


# ────────────────────────────────────────────────────────────────────────
#  4. Output
# ────────────────────────────────────────────────────────────────────────


def format_groups(msg: str, block: int = BLOCK) -> str:
    """Drop whitespace and split MSG into space-separated groups of BLOCK."""
    clean = "".join(msg.split())
    return " ".join(clean[i : i + block] for i in range(0, len(clean), block))


__all__ = [
    "MachineConfig",
    "Settings",
    "check_disjoint",
    "format_groups",
    "is_settings_line",
    "load_config",
    "parse_counts",
    "parse_rotor",
    "parse_settings",
]
