from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_ENV_VAR = "PANOZOOM_CONFIG"


@dataclass
class TilerConfig:
    output_root: Path = Path("tiles")
    # Deep Zoom output uses 512; smaller sizes are for tests and previews
    tile_size: int = 512
    jpeg_quality: int = 90
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    show_progress: bool = True
    # Per-stage timings, logged at the end of a run
    profiling: bool = True

    def __post_init__(self) -> None:
        self.output_root = Path(self.output_root)
        if self.log_file is not None:
            self.log_file = Path(self.log_file)
        if self.tile_size < 1:
            raise ValueError(f"tile_size must be >= 1, got {self.tile_size}")
        if not 1 <= self.jpeg_quality <= 95:
            raise ValueError(
                f"jpeg_quality must be within 1..95, got {self.jpeg_quality}"
            )


def _as_path_or_none(v: Any) -> Optional[Path]:
    if v is None or v == "":
        return None
    return Path(v)


def load_config(path: Path) -> TilerConfig:
    with path.open("r") as f:
        data: Dict[str, Any] = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(
            f"{path}: expected a mapping at top level, got {type(data).__name__}"
        )

    return TilerConfig(
        output_root=Path(data.get("output_root", "tiles")),
        tile_size=int(data.get("tile_size", 512)),
        jpeg_quality=int(data.get("jpeg_quality", 90)),
        log_level=str(data.get("log_level", "INFO")),
        log_file=_as_path_or_none(data.get("log_file")),
        show_progress=bool(data.get("show_progress", True)),
        profiling=bool(data.get("profiling", True)),
    )


def config_from_env(environ: Optional[Dict[str, str]] = None) -> TilerConfig:
    env = os.environ if environ is None else environ
    path = env.get(CONFIG_ENV_VAR)
    if not path:
        return TilerConfig()
    return load_config(Path(path))
