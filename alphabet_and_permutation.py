# alphabet_and_permutation.py
from __future__ import annotations

import re
import string
from collections.abc import Iterator

from errors import InvalidCharacter, InvalidConfiguration, MalformedCycle

ALPHA26 = string.ascii_uppercase

_cycle_re = re.compile(r"\(([^()\s]*)\)")
_RESERVED = "()*"


# ── Alphabet ──────────────────────────────────────────────────────
class Alphabet:
    """An ordered set of distinct symbols; symbol K has index K."""

    def __init__(self, chars: str = ALPHA26) -> None:
        if not chars:
            raise InvalidConfiguration("Alphabet must contain at least one symbol.")
        seen: set[str] = set()
        for ch in chars:
            if ch.isspace() or ch in _RESERVED:
                raise InvalidConfiguration(f"Symbol {ch!r} cannot be part of an alphabet.")
            if ch in seen:
                raise InvalidConfiguration(f"Duplicate symbol {ch!r} in alphabet.")
            seen.add(ch)

        self.chars: str = chars
        self.alpha_to_index: dict[str, int] = {
            ch: i for i, ch in enumerate(chars)
        }

    def size(self) -> int:
        return len(self.chars)

    def contains(self, symbol: str) -> bool:
        return symbol in self.alpha_to_index

    # symbol → integer signal
    def to_index(self, symbol: str) -> int:
        try:
            return self.alpha_to_index[symbol]
        except KeyError:
            raise InvalidCharacter(symbol, self.chars) from None

    # integer signal → symbol
    def to_char(self, index: int) -> str:
        if not (0 <= index < len(self.chars)):
            hi = len(self.chars) - 1
            raise IndexError(f"Signal {index} out of range 0–{hi}")
        return self.chars[index]

    def __len__(self) -> int:
        return len(self.chars)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.alpha_to_index

    def __iter__(self) -> Iterator[str]:
        return iter(self.chars)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Alphabet) and other.chars == self.chars

    def __hash__(self) -> int:
        return hash(self.chars)

    def __repr__(self) -> str:
        return f"<Alphabet {self.chars!r}>"


# ── Permutation ───────────────────────────────────────────────────
class Permutation:
    """A permutation of an alphabet in cycle notation, e.g. ``"(ABC) (DE)"``.

    Symbols missing from every cycle map to themselves. Cycles are assumed
    disjoint; the configuration loader is responsible for that.
    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        self.alphabet: Alphabet = alphabet
        self._cycles: list[str] = []

        # integer lookup tables, identity until cycles are added
        self._fwd: list[int] = list(range(alphabet.size()))
        self._rev: list[int] = list(range(alphabet.size()))

        self.add_cycle(cycles)

    # ── construction ─────────────────────────────────────────────
    def _parse(self, spec: str) -> list[str]:
        text = spec.strip()
        if not text:
            return []
        if "(" not in text and ")" not in text:
            if any(ch.isspace() for ch in text):
                raise MalformedCycle(spec, "cycles must be parenthesised")
            found = [text]
        else:
            found = _cycle_re.findall(text)
            leftover = _cycle_re.sub("", text)
            if leftover.strip():
                raise MalformedCycle(spec, f"unexpected text {leftover.strip()!r}")

        for cycle in found:
            if not cycle:
                raise MalformedCycle(spec, "empty cycle")
            for ch in cycle:
                if ch not in self.alphabet:
                    raise MalformedCycle(spec, f"{ch!r} is not in the alphabet")
            if len(set(cycle)) != len(cycle):
                raise MalformedCycle(spec, f"symbol repeated in ({cycle})")
        return found

    def add_cycle(self, cycle: str) -> None:
        """Add c0->c1->...->cm->c0. Accepts ``"ABC"``, ``"(ABC)"`` or several."""
        for c in self._parse(cycle):
            idx = [self.alphabet.to_index(ch) for ch in c]
            m = len(idx)
            for j, i in enumerate(idx):
                self._fwd[i] = idx[(j + 1) % m]
                self._rev[i] = idx[(j - 1) % m]
            self._cycles.append(c)

    # ── queries ──────────────────────────────────────────────────
    @property
    def cycles(self) -> tuple[str, ...]:
        return tuple(self._cycles)

    def size(self) -> int:
        return self.alphabet.size()

    def wrap(self, p: int) -> int:
        """Return P modulo the alphabet size, always in [0, size)."""
        return p % self.size()

    def permute(self, p: int | str) -> int | str:
        """Apply me to index P (mod size), or to symbol P."""
        if isinstance(p, str):
            return self.alphabet.to_char(self._fwd[self.alphabet.to_index(p)])
        return self._fwd[self.wrap(p)]

    def invert(self, c: int | str) -> int | str:
        if isinstance(c, str):
            return self.alphabet.to_char(self._rev[self.alphabet.to_index(c)])
        return self._rev[self.wrap(c)]

    def derangement(self) -> bool:
        """True iff no symbol maps to itself."""
        return all(v != i for i, v in enumerate(self._fwd))

    def __str__(self) -> str:
        return " ".join(f"({c})" for c in self._cycles)

    def __repr__(self) -> str:
        return f"<Permutation {self}>"
