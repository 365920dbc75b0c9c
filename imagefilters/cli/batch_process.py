"""
Batch filter runner.
Applies a chain of named filters to one image or a folder of images and
writes the results.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import load_dotenv
from tqdm import tqdm

from ..errors import ImageFiltersError
from ..models.filter_name import FilterName
from ..pipeline.filter_pipeline import parse_filter_chain
from ..repositories.image_repository import ImageRepository
from ..services.image_session import ImageSession

# Load environment variables first
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CHAIN = ["moreContrast", "darken", "greyScale", "lessContrast", "lighten"]
OUTPUT_DIR = os.getenv("OUTPUT_DIR_PATH", "data/filtered")
OUTPUT_EXT = os.getenv("OUTPUT_IMG_EXT", ".png")


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Apply brightness/contrast/greyscale filters to images")
    g_io = p.add_argument_group("I/O")
    g_io.add_argument("--image", type=str, help="Resource name or path of a single image")
    g_io.add_argument("--dir", type=str, help="Path to a directory of images")
    g_io.add_argument("--recursive", action="store_true", help="Walk --dir recursively")
    g_io.add_argument("--save_dir", type=str, default=OUTPUT_DIR, help="Output folder")
    g_io.add_argument("--resource_dir", type=str, default=None, help="Where named resources live")
    g_io.add_argument("--ext", type=str, default=OUTPUT_EXT, help="Output file extension")

    g_flt = p.add_argument_group("Filters")
    g_flt.add_argument("--filters", nargs="+", default=DEFAULT_CHAIN,
                       help=f"Filter names applied in order ({', '.join(FilterName.names())})")
    g_flt.add_argument("--strict", action="store_true", help="Fail on unknown filter names")
    g_flt.add_argument("--averages", action="store_true", help="Log RGBA averages before and after")
    g_flt.add_argument("--log_level", type=str, default=None)
    return p


def process_one(
    name: str | Path,
    session: ImageSession,
    filters: Sequence[str],
    *,
    repository: ImageRepository,
    save_dir: str | Path,
    ext: str,
    strict: bool = False,
    averages: bool = False,
) -> Path:
    """
    Run *filters* over *session* and save the result.

    *name* may hold sub-folders (relative to the input folder); they are
    mirrored under *save_dir* so same-named files never collide.

    Returns:
        Path: Where the filtered image was written
    """
    if averages:
        logger.info("%s before: %s", name, session.rgba_averages())

    result = session.filter(list(filters), strict=strict)

    if averages:
        logger.info("%s after:  %s", name, result.rgba_averages())

    ext = ext if ext.startswith(".") else f".{ext}"
    name = Path(name)
    out_path = Path(save_dir) / name.parent / f"{name.stem}_filtered{ext}"
    return repository.save(result.image, out_path)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argparser().parse_args(argv)
    configure_logging(args.log_level)

    if not args.image and not args.dir:
        logger.error("Provide either --image or --dir")
        return 1

    try:
        chain = parse_filter_chain(args.filters, strict=args.strict)
    except ImageFiltersError as err:
        logger.error("%s", err)
        return 1
    logger.info("Filter chain: %s", " → ".join(f.value for f in chain) or "(empty)")

    repository = ImageRepository(resource_dir=args.resource_dir)
    options = dict(repository=repository, save_dir=args.save_dir, ext=args.ext,
                   strict=args.strict, averages=args.averages)

    try:
        if args.image:
            if Path(args.image).is_file():
                session = ImageSession.from_path(args.image, repository, strict=args.strict)
            else:
                session = ImageSession.from_name(args.image, repository, strict=args.strict)
            out = process_one(Path(args.image).name, session, args.filters, **options)
            logger.info("Saved %s", out)
            return 0

        written = []
        for path, image in tqdm(repository.iter_dir(args.dir, recursive=args.recursive),
                                desc="filter", ncols=70):
            session = ImageSession(image, strict=args.strict)
            rel = path.relative_to(args.dir)
            written.append(process_one(rel, session, args.filters, **options))
        logger.info("Saved %d images to %s", len(written), args.save_dir)
        return 0
    except (ImageFiltersError, ValueError, OSError) as err:
        # ValueError also covers Pillow rejecting an unknown --ext
        logger.error("%s", err)
        return 1


if __name__ == "__main__":
    sys.exit(main())
