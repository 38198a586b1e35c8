"""Programmatic API: search, download, and render a batch of cards."""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .batch import BatchResult, CardOptions, download_all, prepare_stage, process_directory
from .config import Config, load_config, load_config_from_dict
from .unsplash import search_photos


def generate_cards(
    query: str,
    headline: str,
    *,
    description: str = "",
    font_size: int = 64,
    border_radius: int = 0,
    description_color_offset: int = 0,
    config: Config | Mapping[str, Any] | str | Path | None = None,
    progress: bool = False,
) -> BatchResult:
    """Search Unsplash for *query* and render one card per result.

    Args:
        query: Unsplash search terms.
        headline: Large white text drawn on every card.
        description: Smaller gray text drawn under the headline.
        font_size: Headline size in points; the description uses half.
        border_radius: Corner radius in pixels (0 = square corners).
        description_color_offset: Subtracted from 255 to get the description
            gray; clamped to 0–255.
        config: ``None`` for defaults, a ``Config``, a dict using the
            ``config.yaml`` schema, or a path to a YAML file.
        progress: Show progress bars.

    Returns:
        The batch summary; finished cards are listed in ``succeeded``.
    """
    resolved = _resolve_config(config)
    photos = search_photos(query, resolved.unsplash)

    stage_dir = prepare_stage(Path(resolved.stage_dir))
    download_all(photos, stage_dir, progress=progress)

    options = CardOptions(
        headline=headline,
        description=description,
        font_size=font_size,
        border_radius=border_radius,
        description_color_offset=description_color_offset,
        card=resolved.card,
    )
    output_dir = Path(resolved.output_dir) if resolved.output_dir else stage_dir
    return process_directory(
        stage_dir,
        options,
        output_dir=output_dir,
        workers=resolved.workers,
        progress=progress,
    )


def _resolve_config(config: Config | Mapping[str, Any] | str | Path | None) -> Config:
    if config is None:
        return Config()
    if isinstance(config, Config):
        return config
    if isinstance(config, Mapping):
        return load_config_from_dict(config)
    if isinstance(config, (str, Path)):
        return load_config(Path(config))
    raise TypeError(
        "config must be None, Config, dict-like mapping, or a config file path."
    )
