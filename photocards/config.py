from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass
class UnsplashConfig:
    """Credentials and request settings for the Unsplash search API."""

    access_key: str = ""
    secret_key: str = ""
    per_page: int = 10  # number of search results to download (API max 30)
    api_url: str = "https://api.unsplash.com"


@dataclass
class CardConfig:
    """Fixed layout and filter settings applied to every card."""

    width: int = 2251  # output canvas width in pixels
    height: int = 432  # output canvas height in pixels
    brightness: int = -85  # added to every RGB channel (-255..255)
    blur_sigma: float = 15.0  # standard deviation of the Gaussian blur
    headline_bias: int = 7  # centered x offset is divided by this
    description_gap: int = 30  # pixels between headline baseline area and description
    font: str = ""  # path to a TrueType font; empty = first bold sans found


@dataclass
class Config:
    """Top-level configuration aggregating API and card settings."""

    unsplash: UnsplashConfig = field(default_factory=UnsplashConfig)
    card: CardConfig = field(default_factory=CardConfig)
    stage_dir: str = ".stage"  # downloads land here; wiped at the start of each run
    output_dir: str = ""  # finished cards; empty = stage_dir
    workers: int = 0  # process pool size; 0 = one per CPU, 1 = sequential


def load_config(path: Optional[Path]) -> Config:
    """Load configuration from a YAML file, returning defaults if *path* is None or missing."""
    if path is None or not path.exists():
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    return load_config_from_dict(data)


def load_config_from_dict(data: Mapping[str, Any]) -> Config:
    """Build a :class:`Config` from a mapping using the ``config.yaml`` schema.

    Unknown keys are ignored at every level.
    """
    unsplash_fields = {
        k: v
        for k, v in (data.get("unsplash") or {}).items()
        if k in UnsplashConfig.__dataclass_fields__
    }
    card_fields = {
        k: v
        for k, v in (data.get("card") or {}).items()
        if k in CardConfig.__dataclass_fields__
    }
    top_fields = {
        k: data[k]
        for k in ("stage_dir", "output_dir", "workers")
        if k in data
    }

    # Flat credentials (config.toml style) are accepted next to the unsplash block
    for key in ("access_key", "secret_key"):
        if key in data:
            unsplash_fields.setdefault(key, data[key])

    workers = top_fields.get("workers", 0)
    if not isinstance(workers, int) or workers < 0:
        raise ValueError(f"workers must be a non-negative integer, got {workers!r}")

    return Config(
        unsplash=UnsplashConfig(**unsplash_fields),
        card=CardConfig(**card_fields),
        **top_fields,
    )
