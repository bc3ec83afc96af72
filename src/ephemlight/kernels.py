"""Skyfield kernel access shared by the library-backed solar and lunar models."""

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from skyfield.api import Loader

from ephemlight.clock import ensure_utc

logger = logging.getLogger(__name__)

DEFAULT_KERNEL = "de421.bsp"


class ProviderUnavailable(RuntimeError):
    """External ephemeris capability failed or could not be loaded."""


class KernelSource:
    """Skyfield timescale + JPL kernel, loaded on first use.

    Args:
        data_dir: Directory skyfield's Loader reads kernels from (and
            downloads into when a kernel is missing).
        kernel: Kernel file name.
        loader: Optional pre-built skyfield ``Loader`` (or compatible callable).
    """

    def __init__(
        self,
        data_dir: Path | str,
        kernel: str = DEFAULT_KERNEL,
        loader: Callable[[str], Any] | None = None,
    ):
        self.data_dir = Path(data_dir)
        self.kernel = kernel
        self._loader = loader
        self._ts = None
        self._eph = None
        self._lock = threading.Lock()

    def _ensure_loaded(self) -> None:
        if self._eph is not None:
            return
        with self._lock:
            if self._eph is None:
                self._load()

    def _load(self) -> None:
        try:
            loader = self._loader or Loader(str(self.data_dir), verbose=False)
            ts = loader.timescale()
            eph = loader(self.kernel)
        except Exception as exc:
            # skyfield reports missing files, failed downloads and corrupt
            # kernels with unrelated exception types
            raise ProviderUnavailable(
                f"Cannot load {self.kernel} from {self.data_dir}: {exc}"
            ) from exc
        logger.info(f"Loaded ephemeris kernel {self.kernel} from {self.data_dir}")
        self._ts, self._eph = ts, eph

    @property
    def ephemeris(self):
        self._ensure_loaded()
        return self._eph

    def time(self, instant: datetime):
        """Skyfield Time for a UTC instant."""
        self._ensure_loaded()
        return self._ts.from_datetime(ensure_utc(instant))  # type: ignore[union-attr]
