"""Runtime configuration for the panel controller (in-memory, env overrides)."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any, Mapping

from peekbar.log import get_logger

log = get_logger(name="config")

ENV_PREFIX = "PEEKBAR_"

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


@dataclass
class Config:
    """Timings and thresholds with the reference defaults."""

    # Panel thickness in pixels; also the leave offset below the top edge
    panel_height: int = 32
    # Pressure (pixels pushed across the edge) needed to reveal the panel
    pressure_threshold: int = 15
    # Window in ms over which pressure accumulates before it is discarded
    pressure_timeout_ms: int = 200
    # Cadence of the pointer poll that detects leaving the panel zone
    leave_poll_ms: int = 400
    # Period of the fullscreen enforcement reconciliation loop
    enforce_interval_ms: int = 1000
    # Extra delay before hiding the panel once the pointer has left
    hide_confirm_ms: int = 200
    # Panel opacity (0-255) while flashing
    flash_opacity: int = 80
    # How long a single flash keeps the panel dimmed
    flash_dim_ms: int = 50
    # Gap between the two flashes signalling "enforcement off"
    flash_gap_ms: int = 150
    # Initial state of the enforcement flag
    enforce_visible: bool = True
    # Pointer sampling interval of the edge barrier backend
    barrier_sample_ms: int = 16

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """Build a config from defaults overridden by PEEKBAR_<FIELD> variables.

        Unparsable or negative values keep the default and log a warning.
        """
        environ = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}
        for f in fields(cls):
            raw = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
            if raw is None:
                continue
            try:
                overrides[f.name] = _parse(raw, f.default)
            except ValueError:
                log.warning(
                    "Ignoring %s%s=%r, keeping %r",
                    ENV_PREFIX,
                    f.name.upper(),
                    raw,
                    f.default,
                )
        return cls(**overrides)


def _parse(raw: str, default: Any) -> Any:
    """Coerce an env string to the type of the field default."""
    text = raw.strip().lower()
    if isinstance(default, bool):
        if text in _TRUE_WORDS:
            return True
        if text in _FALSE_WORDS:
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    value = int(text)
    if value < 0:
        raise ValueError(f"negative value: {raw!r}")
    return value
