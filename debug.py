# debug.py
from __future__ import annotations

import logging
from typing import Dict

COMPONENTS = ("plugboard", "rotor", "reflector", "stepping", "encipher", "config")


class Debug:
    """Trace sink handed to the machine and the config loader.

    Nothing is logged unless the global switch is on *and* the component
    has been enabled. Every instance writes to the shared ``ENIGMA`` logger.
    """

    _root_configured: bool = False          # class-level guard

    def __init__(self, *, log_to: str | None = None, configure: bool = True) -> None:
        """
        If `log_to` is given, messages also stream to that file.
        `configure=False` leaves the root logger alone (tests use caplog).
        """
        if configure and not Debug._root_configured:
            handlers: list[logging.Handler] = [logging.StreamHandler()]
            if log_to:
                handlers.append(logging.FileHandler(log_to, encoding="utf-8"))

            logging.basicConfig(
                level=logging.DEBUG,
                format="[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
                handlers=handlers,
            )
            Debug._root_configured = True

        self.logger = logging.getLogger("ENIGMA")
        self.enabled = True        # global switch
        self.components: Dict[str, bool] = {c: False for c in COMPONENTS}

    # ── logging API ──────────────────────────────────────────────
    def active(self, component: str) -> bool:
        return self.enabled and self.components.get(component, False)

    def log(self, component: str, message: str, *args: object) -> None:
        if self.active(component):
            self.logger.debug("[%s] " + message, component.upper(), *args)

    # ── component toggles ────────────────────────────────────────
    def enable(self, *components: str) -> "Debug":
        for c in components:
            self._require(c)
            self.components[c] = True
        return self

    def disable(self, *components: str) -> "Debug":
        for c in components:
            self._require(c)
            self.components[c] = False
        return self

    def toggle(self, component: str) -> None:
        self._require(component)
        self.components[component] = not self.components[component]

    def toggle_global(self, state: bool) -> None:
        """Switch every component on/off at once."""
        self.enabled = state

    def status(self) -> Dict[str, bool]:
        """Return a *copy* of the current component map."""
        return self.components.copy()

    # ── helpers ──────────────────────────────────────────────────
    def _require(self, component: str) -> None:
        if component not in self.components:
            raise ValueError(f"No such component: {component!r}")

    def __repr__(self) -> str:
        active = [k for k, v in self.components.items() if v]
        return f"<Debug enabled={self.enabled} active={active}>"
