from __future__ import annotations
from pathlib import Path
from typing import Union, Iterable, List, Iterator, Tuple
import logging
import os

import cv2
import numpy as np
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..errors import DecodeError, ResourceNotFoundError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

_DEFAULT_EXTS = ".png,.jpg,.jpeg,.bmp,.tif,.tiff,.webp,.ppm"

# cv2.imread(IMREAD_UNCHANGED) channel count → conversion to RGBA
_TO_RGBA = {
    3: cv2.COLOR_BGR2RGBA,
    4: cv2.COLOR_BGRA2RGBA,
}


class ImageRepository:
    """
    Resolves image resources by name and handles file I/O.
    Images are returned as RGBA Pillow images.
    """
    def __init__(self,
                 resource_dir: Union[str, Path] = None,
                 default_name: str = None,
                 valid_exts: Iterable[str] = None):
        self.resource_dir = Path(resource_dir or os.getenv("IMAGE_RESOURCE_DIR", "resources"))
        self.default_name = default_name or os.getenv("DEFAULT_IMAGE_NAME", "sample")
        if valid_exts is None:
            valid_exts = os.getenv("VALID_IMAGE_EXTENSIONS", _DEFAULT_EXTS).split(",")
        self.VALID_EXTS = {self._norm_ext(ext) for ext in valid_exts if ext.strip()}

    @staticmethod
    def _norm_ext(ext: str) -> str:
        ext = ext.strip().lower()
        return ext if ext.startswith(".") else f".{ext}"

    # ─── Resource lookup ───────────────────────────────────────────
    def resolve(self, name: Union[str, Path]) -> Path:
        """
        Find the file for a resource *name*.

        "sample" matches resources/sample.png (or any allowed extension),
        "sample.jpg" is taken as it is.  Names never reach outside the
        resource directory: absolute paths and ".." segments that leave it
        are treated as missing.
        """
        if not str(name).strip():
            raise ResourceNotFoundError("Empty resource name")

        root = self.resource_dir.resolve()
        candidates = [self.resource_dir / name]
        candidates += [self.resource_dir / f"{name}{ext}" for ext in sorted(self.VALID_EXTS)]
        for path in candidates:
            if path.resolve().is_relative_to(root) and path.is_file():
                return path

        raise ResourceNotFoundError(
            f"Image resource {str(name)!r} not found in {self.resource_dir}"
        )

    def load(self, name: Union[str, Path]) -> PILImage.Image:
        """Load a named resource from the resource directory as an RGBA Pillow image."""
        path = self.resolve(name)
        return self.read(path)

    def load_default(self) -> PILImage.Image:
        return self.load(self.default_name)

    def load_path(self, path: Union[str, Path]) -> PILImage.Image:
        """Load an explicit file path, wherever it lives."""
        path = Path(path)
        if not path.is_file():
            raise ResourceNotFoundError(f"Image file not found: {path}")
        return self.read(path)

    @staticmethod
    def read(path: Union[str, Path]) -> PILImage.Image:
        path = Path(path)
        arr = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        if arr is None:
            raise DecodeError(f"Image unreadable: {path}")

        if arr.dtype != np.uint8:
            # 16-bit PNG/TIFF → 8-bit
            arr = (arr / 257).astype(np.uint8)

        if arr.ndim == 2:
            rgba = cv2.cvtColor(arr, cv2.COLOR_GRAY2RGBA)
        elif arr.shape[2] in _TO_RGBA:
            rgba = cv2.cvtColor(arr, _TO_RGBA[arr.shape[2]])
        else:
            raise DecodeError(f"Unsupported channel count {arr.shape[2]}: {path}")

        logger.debug("Loaded %s (%dx%d)", path, rgba.shape[1], rgba.shape[0])
        return PILImage.fromarray(rgba)

    @staticmethod
    def save(image: PILImage.Image, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix.lower() in (".jpg", ".jpeg") and image.mode == "RGBA":
            # JPEG has no alpha channel
            image = image.convert("RGB")
        image.save(path)
        logger.debug("Saved %s", path)
        return path

    # ─── Directories ───────────────────────────────────────────────
    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Tuple[Path, PILImage.Image]]:
        """
        Yield (path, image) pairs one at a time.  Nothing accumulates in memory.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {self._norm_ext(e) for e in exts} if exts else self.VALID_EXTS
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if not p.is_file() or p.suffix.lower() not in allowed:
                continue
            try:
                image = self.read(p)
            except DecodeError as err:
                logger.warning("Skipping %s: %s", p.name, err)
                continue
            yield p, image

    def load_dir(
        self, folder: Union[str, Path], *, recursive=False, exts=None
    ) -> List[Tuple[Path, PILImage.Image]]:
        return list(self.iter_dir(folder, recursive=recursive, exts=exts))
