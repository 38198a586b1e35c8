import argparse
import sys
from pathlib import Path

from .batch import CardOptions, download_all, prepare_stage, process_directory
from .config import load_config
from .errors import UnsplashError
from .unsplash import search_photos


def _non_negative(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be a non-negative integer, got {value}")
    return number


def _positive(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def main() -> None:
    """CLI entry point: search Unsplash, download the results, and render cards."""
    parser = argparse.ArgumentParser(
        prog="photocards",
        description="Turn Unsplash search results into blurred, captioned, rounded social cards",
    )
    parser.add_argument("query", help="Unsplash search query")
    parser.add_argument("text", help="Headline drawn on every card")
    parser.add_argument("font_size", type=_positive, help="Headline font size (description uses half)")
    parser.add_argument("border_radius", type=_non_negative, help="Corner radius in pixels (0 = square)")
    parser.add_argument("description", help="Description drawn under the headline")
    parser.add_argument(
        "description_color_offset",
        type=_non_negative,
        help="Description gray is 255 minus this value (clamped to 0-255)",
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=Path("config.yaml"),
        help="Path to config.yaml (default: ./config.yaml, optional)",
    )
    parser.add_argument(
        "-o", "--output-dir", type=Path, default=None,
        help="Directory for finished cards (default: the stage directory)",
    )
    parser.add_argument(
        "-w", "--workers", type=_non_negative, default=None,
        help="Worker processes (0 = one per CPU, 1 = sequential)",
    )
    parser.add_argument(
        "--stage-dir", type=Path, default=None,
        help="Scratch directory for downloads; emptied on every run (default: .stage)",
    )
    parser.add_argument(
        "--no-progress", action="store_true",
        help="Hide progress bars",
    )

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except ValueError as exc:
        print(f"Error: invalid config '{args.config}': {exc}", file=sys.stderr)
        sys.exit(1)
    stage_dir = args.stage_dir or Path(config.stage_dir)
    output_dir = args.output_dir or (Path(config.output_dir) if config.output_dir else stage_dir)
    workers = config.workers if args.workers is None else args.workers
    progress = not args.no_progress

    print(f"Fetching images for '{args.query}' …")
    try:
        photos = search_photos(args.query, config.unsplash)
    except UnsplashError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    if not photos:
        print(f"No images found for '{args.query}'.", file=sys.stderr)
        sys.exit(1)

    prepare_stage(stage_dir)
    download_all(photos, stage_dir, progress=progress)

    options = CardOptions(
        headline=args.text,
        description=args.description,
        font_size=args.font_size,
        border_radius=args.border_radius,
        description_color_offset=args.description_color_offset,
        card=config.card,
    )
    result = process_directory(
        stage_dir, options, output_dir=output_dir, workers=workers, progress=progress,
    )

    for path, message in sorted(result.failed.items()):
        print(f"Failed: {path.name}: {message}", file=sys.stderr)
    print(f"Complete: {result.summary()} → {output_dir}")
    if not result.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
