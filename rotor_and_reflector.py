# rotor_and_reflector.py
from __future__ import annotations

from enum import Enum

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import InvalidConfiguration


class RotorKind(Enum):
    REFLECTOR = "R"
    FIXED = "N"
    MOVING = "M"


class Rotor:
    """One wheel of the machine.

    Reflectors, fixed rotors and moving rotors share this class; the
    behavioural differences are decided by ``kind``. ``offset`` is the
    position shown in the window, ``ring`` the ring setting.
    """

    def __init__(
        self,
        name: str,
        perm: Permutation,
        kind: RotorKind = RotorKind.FIXED,
        notches: str = "",
    ) -> None:
        if notches and kind is not RotorKind.MOVING:
            raise InvalidConfiguration(f"Rotor {name!r}: only moving rotors have notches")
        for ch in notches:
            if ch not in perm.alphabet:
                raise InvalidConfiguration(f"Rotor {name!r}: notch {ch!r} not in alphabet")

        self.name = name
        self.kind = kind
        self.permutation = perm
        self.notches = frozenset(notches)
        self.offset = 0
        self.ring = 0

    # ── factories ─────────────────────────────────────────────────
    @classmethod
    def moving(cls, name: str, perm: Permutation, notches: str) -> "Rotor":
        return cls(name, perm, RotorKind.MOVING, notches)

    @classmethod
    def fixed(cls, name: str, perm: Permutation) -> "Rotor":
        return cls(name, perm, RotorKind.FIXED)

    @classmethod
    def reflector(cls, name: str, perm: Permutation) -> "Rotor":
        return cls(name, perm, RotorKind.REFLECTOR)

    # ── capabilities ──────────────────────────────────────────────
    @property
    def alphabet(self) -> Alphabet:
        return self.permutation.alphabet

    @property
    def rotates(self) -> bool:
        return self.kind is RotorKind.MOVING

    @property
    def reflecting(self) -> bool:
        return self.kind is RotorKind.REFLECTOR

    def size(self) -> int:
        return self.permutation.size()

    # ── position & ring ───────────────────────────────────────────
    @property
    def setting(self) -> str:
        """Symbol currently in the window."""
        return self.alphabet.to_char(self.offset)

    def _position(self, posn: int | str) -> int:
        if isinstance(posn, str):
            return self.alphabet.to_index(posn)
        return self.permutation.wrap(posn)

    def set_offset(self, posn: int | str) -> "Rotor":
        self.offset = self._position(posn)
        return self

    def set_ring(self, ring: int | str) -> "Rotor":
        self.ring = self._position(ring)
        return self

    def advance(self) -> None:
        if self.kind is RotorKind.MOVING:
            self.offset = self.permutation.wrap(self.offset + 1)

    def at_notch(self) -> bool:
        if self.kind is not RotorKind.MOVING:
            return False
        return self.setting in self.notches

    # ── signal paths ---------------------------------------------
    def convert_forward(self, p: int, debug: Debug | None = None) -> int:
        shift = self.offset - self.ring
        perm = self.permutation
        result = perm.wrap(perm.permute(perm.wrap(p + shift)) - shift)
        if debug is not None and debug.active("rotor"):
            debug.log("rotor", "%s fwd %s -> %s", self.name,
                      self.alphabet.to_char(perm.wrap(p)), self.alphabet.to_char(result))
        return result

    def convert_backward(self, e: int, debug: Debug | None = None) -> int:
        shift = self.offset - self.ring
        perm = self.permutation
        result = perm.wrap(perm.invert(perm.wrap(e + shift)) - shift)
        if debug is not None and debug.active("rotor"):
            debug.log("rotor", "%s bwd %s -> %s", self.name,
                      self.alphabet.to_char(perm.wrap(e)), self.alphabet.to_char(result))
        return result

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return (f"<Rotor {self.name} {self.kind.name.lower()} "
                f"pos={self.offset} ring={self.ring}>")
