"""
Batch orchestration: stage downloads, then turn every staged photo into a card.

Each image is an independent task.  Tasks run on a process pool and a
failing task only marks its own image as failed; the run as a whole reports
a :class:`BatchResult` summary.
"""
from __future__ import annotations

import http.client
import logging
import shutil
import uuid
import warnings
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from tqdm import tqdm

from .config import CardConfig
from .errors import PhotocardsError
from .renderers.card_renderer import render_card
from .unsplash import UnsplashPhoto, download_photo

logger = logging.getLogger(__name__)

_DOWNLOAD_PREFIX = "download-"
_FINAL_PREFIX = "final-"


@dataclass
class CardOptions:
    """Per-run text and numeric parameters shared by every card."""

    headline: str
    description: str = ""
    font_size: int = 64
    border_radius: int = 0
    description_color_offset: int = 0
    card: CardConfig = field(default_factory=CardConfig)


@dataclass
class BatchResult:
    """Outcome of a batch: written cards and per-input failure messages."""

    succeeded: list[Path] = field(default_factory=list)
    failed: dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        return f"{len(self.succeeded)} succeeded, {len(self.failed)} failed"


def prepare_stage(stage_dir: Path) -> Path:
    """Empty *stage_dir*, creating it if needed."""
    if stage_dir.exists():
        shutil.rmtree(stage_dir)
    stage_dir.mkdir(parents=True)
    return stage_dir


def download_all(photos: Iterable[UnsplashPhoto], stage_dir: Path, *,
                 progress: bool = True) -> list[Path]:
    """Download every photo's raw image into *stage_dir* as ``download-<i>.png``.

    A photo that cannot be downloaded is skipped with a warning.
    """
    photos = list(photos)
    written: list[Path] = []
    for i, photo in enumerate(tqdm(photos, desc="Downloading", unit="img", disable=not progress)):
        try:
            data = download_photo(photo.urls.raw)
        except (OSError, ValueError, http.client.HTTPException) as exc:
            warnings.warn(
                f"Could not download '{photo.urls.raw}': {exc}",
                RuntimeWarning,
                stacklevel=2,
            )
            continue
        path = stage_dir / f"{_DOWNLOAD_PREFIX}{i}.png"
        path.write_bytes(data)
        written.append(path)
    return written


def process_file(path: Path, options: CardOptions, output_dir: Path) -> Path:
    """Render the card for one staged file and write it as ``final-<uuid>.png``."""
    img = render_card(
        path.read_bytes(),
        options.headline,
        options.description,
        font_size=options.font_size,
        border_radius=options.border_radius,
        description_color_offset=options.description_color_offset,
        config=options.card,
    )
    out = output_dir / f"{_FINAL_PREFIX}{uuid.uuid4()}.png"
    img.save(out, format="PNG")
    return out


def process_directory(stage_dir: Path, options: CardOptions, *,
                      output_dir: Optional[Path] = None,
                      workers: int = 0,
                      progress: bool = True) -> BatchResult:
    """Process every staged download in *stage_dir*.

    *workers* sets the process pool size (0 = one per CPU); 1 processes the
    files sequentially in this process.
    """
    if workers < 0:
        raise ValueError(f"workers must be non-negative, got {workers}")
    output_dir = output_dir or stage_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    inputs = sorted(stage_dir.glob(f"{_DOWNLOAD_PREFIX}*"))
    result = BatchResult()
    bar = tqdm(total=len(inputs), desc="Processing", unit="img", disable=not progress)

    def record(path: Path, out: Optional[Path], exc: Optional[BaseException]) -> None:
        if exc is None:
            result.succeeded.append(out)
        else:
            logger.debug("Card for %s failed", path, exc_info=exc)
            result.failed[path] = str(exc)
        bar.update(1)

    try:
        if workers == 1:
            for path in inputs:
                try:
                    record(path, process_file(path, options, output_dir), None)
                except (PhotocardsError, OSError) as exc:
                    record(path, None, exc)
        else:
            with ProcessPoolExecutor(max_workers=workers or None) as pool:
                futures = {
                    pool.submit(process_file, path, options, output_dir): path
                    for path in inputs
                }
                for future in as_completed(futures):
                    exc = future.exception()
                    record(futures[future], None if exc else future.result(), exc)
    finally:
        bar.close()
    return result
