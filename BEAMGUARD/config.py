"""Application configuration with simple JSON persistence."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class Config:
    # Stage extent and drawing
    STAGE_DEPTH_M: float = 20.0
    STAGE_HEIGHT_M: float = 20.0
    SCALE_PX_PER_M: float = 20.0
    GRID_STEP_M: float = 1.0

    # Slider ranges
    FIXTURE_DEPTH_MIN_M: float = 0.0
    FIXTURE_DEPTH_MAX_M: float = 20.0
    FIXTURE_HEIGHT_MIN_M: float = 0.0
    FIXTURE_HEIGHT_MAX_M: float = 20.0
    AIM_MIN_DEG: float = -90.0
    AIM_MAX_DEG: float = 90.0
    PERFORMER_DEPTH_MIN_M: float = 0.0
    PERFORMER_DEPTH_MAX_M: float = 20.0
    PERFORMER_HEIGHT_MIN_M: float = 1.5
    PERFORMER_HEIGHT_MAX_M: float = 2.0
    PERFORMER_RADIUS_MIN_M: float = 0.2
    PERFORMER_RADIUS_MAX_M: float = 1.0

    # Initial slider positions
    DEFAULT_FIXTURE_DEPTH_M: float = 0.0
    DEFAULT_FIXTURE_HEIGHT_M: float = 10.0
    DEFAULT_AIM_DEG: float = -45.0
    DEFAULT_PERFORMER_DEPTH_M: float = 5.0
    DEFAULT_PERFORMER_HEIGHT_M: float = 1.7
    DEFAULT_PERFORMER_RADIUS_M: float = 0.3

    # Readouts
    DECIMALS: int = 2
    SHOW_GRID: bool = True

    @staticmethod
    def default_path() -> Path:
        return Path.home() / ".beamguard_config.json"

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        cfg = cls()
        cfg_path = path or cls.default_path()
        if not cfg_path.exists():
            return cfg

        try:
            data = json.loads(cfg_path.read_text())
        except Exception:
            logger.exception("Failed to read config file: %s", cfg_path)
            return cfg

        for f in fields(cfg):
            if f.name not in data:
                continue
            raw = data[f.name]
            try:
                if f.type in (bool, "bool"):
                    val = bool(raw)
                elif f.type in (int, "int"):
                    val = int(raw)
                elif f.type in (float, "float"):
                    val = float(raw)
                else:
                    val = raw
                setattr(cfg, f.name, val)
            except Exception:
                logger.warning("Ignoring invalid config value for %s", f.name)

        cfg.normalize()
        return cfg

    def save(self, path: Optional[Path] = None) -> None:
        cfg_path = path or self.default_path()
        cfg_path.write_text(json.dumps(asdict(self), indent=2, sort_keys=True))

    def normalize(self) -> None:
        pairs = [
            ("FIXTURE_DEPTH_MIN_M", "FIXTURE_DEPTH_MAX_M"),
            ("FIXTURE_HEIGHT_MIN_M", "FIXTURE_HEIGHT_MAX_M"),
            ("AIM_MIN_DEG", "AIM_MAX_DEG"),
            ("PERFORMER_DEPTH_MIN_M", "PERFORMER_DEPTH_MAX_M"),
            ("PERFORMER_HEIGHT_MIN_M", "PERFORMER_HEIGHT_MAX_M"),
            ("PERFORMER_RADIUS_MIN_M", "PERFORMER_RADIUS_MAX_M"),
        ]
        for lo_name, hi_name in pairs:
            lo, hi = getattr(self, lo_name), getattr(self, hi_name)
            if lo > hi:
                setattr(self, lo_name, hi)
                setattr(self, hi_name, lo)

        if self.STAGE_DEPTH_M <= 0 or self.STAGE_HEIGHT_M <= 0:
            logger.warning("Stage extent must be positive, restoring defaults")
            self.STAGE_DEPTH_M = 20.0
            self.STAGE_HEIGHT_M = 20.0
        if self.SCALE_PX_PER_M <= 0:
            self.SCALE_PX_PER_M = 20.0
        if self.GRID_STEP_M <= 0:
            logger.warning("Grid step must be positive, restoring default")
            self.GRID_STEP_M = 1.0
        if not 0 <= self.DECIMALS <= 6:
            logger.warning("DECIMALS out of range (%s), clamping to 0..6", self.DECIMALS)
            self.DECIMALS = int(self._clamp(self.DECIMALS, 0, 6))

        self.DEFAULT_FIXTURE_DEPTH_M = self._clamp(
            self.DEFAULT_FIXTURE_DEPTH_M, self.FIXTURE_DEPTH_MIN_M, self.FIXTURE_DEPTH_MAX_M
        )
        self.DEFAULT_FIXTURE_HEIGHT_M = self._clamp(
            self.DEFAULT_FIXTURE_HEIGHT_M, self.FIXTURE_HEIGHT_MIN_M, self.FIXTURE_HEIGHT_MAX_M
        )
        self.DEFAULT_AIM_DEG = self._clamp(self.DEFAULT_AIM_DEG, self.AIM_MIN_DEG, self.AIM_MAX_DEG)
        self.DEFAULT_PERFORMER_DEPTH_M = self._clamp(
            self.DEFAULT_PERFORMER_DEPTH_M, self.PERFORMER_DEPTH_MIN_M, self.PERFORMER_DEPTH_MAX_M
        )
        self.DEFAULT_PERFORMER_HEIGHT_M = self._clamp(
            self.DEFAULT_PERFORMER_HEIGHT_M, self.PERFORMER_HEIGHT_MIN_M, self.PERFORMER_HEIGHT_MAX_M
        )
        self.DEFAULT_PERFORMER_RADIUS_M = self._clamp(
            self.DEFAULT_PERFORMER_RADIUS_M, self.PERFORMER_RADIUS_MIN_M, self.PERFORMER_RADIUS_MAX_M
        )

    @staticmethod
    def _clamp(value: float, lo: float, hi: float) -> float:
        return max(lo, min(hi, value))
