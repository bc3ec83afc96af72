"""Runtime settings read from the environment (and .env via python-dotenv at entry points)."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ephemlight.kernels import DEFAULT_KERNEL, KernelSource

_ROOT = Path(__file__).parent.parent.parent


@dataclass(frozen=True)
class Settings:
    """Where kernels live, which kernel to use, how loud to log, report language."""

    data_dir: Path = _ROOT / "resources"
    kernel: str = DEFAULT_KERNEL
    log_level: str = "WARNING"
    lang: str = "en"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build Settings from EPHEMLIGHT_* variables, falling back to defaults."""
        default = cls()
        return cls(
            data_dir=Path(os.environ.get("EPHEMLIGHT_DATA_DIR", str(default.data_dir))),
            kernel=os.environ.get("EPHEMLIGHT_KERNEL", default.kernel),
            log_level=os.environ.get("EPHEMLIGHT_LOG_LEVEL", default.log_level).upper(),
            lang=os.environ.get("EPHEMLIGHT_LANG", default.lang),
        )

    @property
    def log_level_value(self) -> int:
        """Numeric logging level; unknown names map to WARNING."""
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.WARNING

    def kernel_source(self) -> KernelSource:
        """Skyfield kernel source for the configured directory and file."""
        return KernelSource(self.data_dir, self.kernel)
