"""Runtime settings for Page Splitter."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from .destinations import STORAGE_STRATEGIES

ENV_PREFIX = "PAGE_SPLITTER_"
_TRUE_VALUES = {"1", "true", "yes", "on"}


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class SplitterSettings:
    """
    Settings shared by the CLI and library callers.

    Attributes:
        output_dir: Storage root that split outputs are placed under
        storage: Destination strategy, ``"legacy"`` or ``"scoped"``
        rollback_on_failure: Remove already-written outputs when a run fails
        strict_ranges: Reject range expressions with malformed tokens
        log_level: Logging level name
    """
    output_dir: Path = Path("./output")
    storage: str = "legacy"
    rollback_on_failure: bool = False
    strict_ranges: bool = False
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.storage not in STORAGE_STRATEGIES:
            raise ValueError(
                f"Unknown storage strategy: {self.storage!r}. "
                f"Expected one of {', '.join(STORAGE_STRATEGIES)}."
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SplitterSettings":
        """Build settings from ``PAGE_SPLITTER_*`` environment variables."""
        env = os.environ if environ is None else environ
        defaults = cls()
        output_dir = env.get(f"{ENV_PREFIX}OUTPUT_DIR")
        return cls(
            output_dir=Path(output_dir) if output_dir else defaults.output_dir,
            storage=(env.get(f"{ENV_PREFIX}STORAGE") or defaults.storage).strip().lower(),
            rollback_on_failure=_flag(env.get(f"{ENV_PREFIX}ROLLBACK"), defaults.rollback_on_failure),
            strict_ranges=_flag(env.get(f"{ENV_PREFIX}STRICT"), defaults.strict_ranges),
            log_level=(env.get(f"{ENV_PREFIX}LOG_LEVEL") or defaults.log_level).strip().upper(),
        )

    def with_overrides(self, **overrides: object) -> "SplitterSettings":
        """Return a copy with every non-``None`` override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if "output_dir" in changes:
            changes["output_dir"] = Path(str(changes["output_dir"]))
        return replace(self, **changes)


__all__ = ["SplitterSettings", "ENV_PREFIX"]
