# debug.py
from __future__ import annotations
import logging
from typing import Dict, Tuple

COMPONENTS: Tuple[str, ...] = (
    "setup",        # rotor binding, settings, plugboard install
    "stepping",     # rotor positions after each key press
    "plugboard",
    "rotor",        # per-rotor forward / backward hops
    "encipher",     # one summary line per converted symbol
)


class Debug:
    """Tracing sink passed explicitly to :class:`machine.Machine`.

    Each component can be switched on and off on its own; nothing is
    process-wide except the one-time root logger configuration.
    """

    _root_configured: bool = False          # class-level guard

    def __init__(self, *components: str, log_to: str | None = None) -> None:
        if not Debug._root_configured:
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

        self.logger = logging.getLogger("enigma")
        self.muted = False
        self.components: Dict[str, bool] = dict.fromkeys(COMPONENTS, False)
        self.enable(*components)

    # ── logging API ──────────────────────────────────────────────
    def active(self, component: str) -> bool:
        return not self.muted and self.components.get(component, False)

    def log(self, component: str, message: str, *args) -> None:
        """Log *message* % *args* under *component* if it is switched on."""
        if self.active(component):
            self.logger.debug("[%s] " + message, component.upper(), *args)

    # ── component switches ───────────────────────────────────────
    def enable(self, *components: str) -> None:
        for c in components:
            self.components[self._check(c)] = True

    def disable(self, *components: str) -> None:
        for c in components:
            self.components[self._check(c)] = False

    def mute(self, state: bool = True) -> None:
        self.muted = state

    def status(self) -> Dict[str, bool]:
        return self.components.copy()

    @staticmethod
    def _check(component: str) -> str:
        if component not in COMPONENTS:
            raise ValueError(f"No such component: {component!r}")
        return component

    def __repr__(self) -> str:
        on = [k for k, v in self.components.items() if v]
        return f"<Debug muted={self.muted} active={on}>"
