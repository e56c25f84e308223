# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Iterable, Sequence

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import InvalidConfiguration
from rotor_and_reflector import Rotor


class Machine:
    """A rotor machine: reflector in slot 0, fast rotor in the last slot.

    ``all_rotors`` is the catalog the settings draw from. ``debug`` is the
    trace sink; the machine logs nothing without one.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        pawls: int,
        all_rotors: Iterable[Rotor],
        debug: Debug | None = None,
    ) -> None:
        if pawls < 1 or pawls >= num_rotors:
            raise InvalidConfiguration(
                f"Need 1 <= pawls < rotors, got {pawls} pawls for {num_rotors} rotors"
            )

        self.alphabet = alphabet
        self._num_rotors = num_rotors
        self._pawls = pawls
        self.debug = debug

        self.catalog: dict[str, Rotor] = {}
        for rotor in all_rotors:
            if rotor.name in self.catalog:
                raise InvalidConfiguration(f"Rotor {rotor.name!r} defined twice")
            self.catalog[rotor.name] = rotor

        self.rotors: list[Rotor] = []
        self.plugboard = Permutation("", alphabet)

    # ── sizes & access ──────────────────────────────────────────

    def num_rotors(self) -> int:
        """Number of rotor slots (reflector included)."""
        return self._num_rotors

    def num_pawls(self) -> int:
        return self._pawls

    def get_rotor(self, k: int) -> Rotor:
        if not 0 <= k < len(self.rotors):
            raise IndexError(f"No rotor in slot {k}")
        return self.rotors[k]

    def window(self) -> str:
        """Current positions of every rotor but the reflector, slowest first."""
        return "".join(r.setting for r in self.rotors[1:])

    # ── settings ────────────────────────────────────────────────

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Replace the stack with the rotors NAMES (NAMES[0] is the reflector).

        Inserted rotors start at offset 0 with ring setting 0.
        """
        if len(set(names)) != len(names):
            raise InvalidConfiguration("Rotors cannot be repeated.")
        if len(names) != self._num_rotors:
            raise InvalidConfiguration(
                f"Expected {self._num_rotors} rotors, got {len(names)}"
            )

        stack = [self.catalog[n] for n in names if n in self.catalog]
        if len(stack) < len(names):
            missing = [n for n in names if n not in self.catalog]
            raise InvalidConfiguration(f"Unknown rotor(s): {', '.join(missing)}")
        if not stack[0].reflecting:
            raise InvalidConfiguration("First rotor must be a reflector")
        if any(r.reflecting for r in stack[1:]):
            raise InvalidConfiguration("Only the first rotor may be a reflector")

        for rotor in stack:
            rotor.set_offset(0).set_ring(0)
        self.rotors = stack

    def _check_setting(self, setting: str, what: str) -> None:
        if not self.rotors:
            raise InvalidConfiguration("No rotors inserted")
        if len(setting) != len(self.rotors) - 1:
            raise InvalidConfiguration(
                f"{what} {setting!r} must be {len(self.rotors) - 1} symbols long"
            )

    def set_rotors(self, setting: str) -> None:
        """Rotate each non-reflector rotor to its window symbol, leftmost first."""
        self._check_setting(setting, "Setting")
        positions = [self.alphabet.to_index(ch) for ch in setting]
        for rotor, posn in zip(self.rotors[1:], positions):
            rotor.set_offset(posn)

    def set_rings(self, setting: str) -> None:
        """Apply ring settings to each non-reflector rotor, leftmost first."""
        self._check_setting(setting, "Ring setting")
        rings = [self.alphabet.to_index(ch) for ch in setting]
        for rotor, ring in zip(self.rotors[1:], rings):
            rotor.set_ring(ring)

    def set_plugboard(self, plugboard: Permutation | str) -> None:
        if isinstance(plugboard, str):
            plugboard = Permutation(plugboard, self.alphabet)
        self.plugboard = plugboard

    def setup(
        self,
        names: Sequence[str],
        setting: str,
        plugboard: Permutation | str = "",
        rings: str | None = None,
    ) -> None:
        """Apply a whole settings block: order, positions, rings, plugs."""
        self.insert_rotors(names)
        self.set_rotors(setting)
        if rings:
            self.set_rings(rings)
        self.set_plugboard(plugboard)

    # ── stepping logic  ─────────────────────────────────────────

    def _advance_rotors(self) -> None:
        """Advance rotors one key-press, double step included."""
        rotors = self.rotors
        n = len(rotors) - 1
        stepped: set[int] = set()

        def step(k: int) -> None:
            if k not in stepped:
                rotors[k].advance()
                stepped.add(k)

        # decide pairwise first, the fast rotor always moves last
        for q in range(1, n):
            left, right = rotors[q], rotors[q + 1]
            if right.at_notch() and right.rotates and left.rotates:
                step(q + 1)
                step(q)
        step(n)

        if self.debug is not None:
            self.debug.log("stepping", "window %s", self.window())

    # ── encipher one symbol  ────────────────────────────────────

    def convert_index(self, c: int) -> int:
        """Convert index C after first advancing the machine."""
        if not self.rotors:
            raise InvalidConfiguration("No rotors inserted")
        self._advance_rotors()
        debug = self.debug

        signal = self.plugboard.permute(c)
        path = [c, signal]

        for rotor in reversed(self.rotors[1:]):
            signal = rotor.convert_forward(signal, debug)

        signal = self.rotors[0].permutation.permute(signal)
        path.append(signal)

        for rotor in self.rotors[1:]:
            signal = rotor.convert_backward(signal, debug)

        signal = self.plugboard.permute(signal)
        path.append(signal)

        if debug is not None and debug.active("encipher"):
            debug.log("encipher", "[%s] %s", self.window(),
                      " -> ".join(self.alphabet.to_char(i) for i in path))
        return signal

    def convert_message(self, msg: str) -> str:
        """Convert MSG symbol by symbol; whitespace is copied and does not step."""
        out: list[str] = []
        for ch in msg:
            if ch.isspace():
                out.append(ch)
                continue
            index = self.alphabet.to_index(ch)
            out.append(self.alphabet.to_char(self.convert_index(index)))
        return "".join(out)

    def convert(self, value: int | str) -> int | str:
        """Index in, index out; text in, text out."""
        if isinstance(value, str):
            return self.convert_message(value)
        return self.convert_index(value)

    def __repr__(self) -> str:
        names = " ".join(r.name for r in self.rotors)
        return f"<Machine [{names}] window={self.window()!r} plugs={self.plugboard}>"
