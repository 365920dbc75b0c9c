from __future__ import annotations
import math
from enum import Enum
from typing import Optional

from ..errors import InvalidFactorError

DEFAULT_BRIGHTNESS = 0.25       # lighten() / darken()
DEFAULT_LESS_CONTRAST = 0.5     # lessContrast()
DEFAULT_MORE_CONTRAST = 2.0     # moreContrast()
DEFAULT_CONTRAST_PRIMITIVE = 2.0
NEUTRAL_CONTRAST = 1.0


class _NoArgument:
    """Marker for "called with no argument at all", as opposed to an explicit None."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "NO_ARGUMENT"


NO_ARGUMENT = _NoArgument()


class ContrastMode(str, Enum):
    LESS = "less"
    MORE = "more"


def _finite(value) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise InvalidFactorError(f"Factor must be finite, got {value}")
    return value


# ── Brightness (additive family) ─────────────────────────────────────
def normalize_brightness(percent: Optional[float]) -> float:
    """
    Turn a lighten/darken argument into a factor.

    0.3 and 30 both mean 30 %.  The sign is ignored, so -0.3 is also 0.3.
    None gives the 25 % default; 0 is a real value and gives a no-op.
    """
    if percent is None:
        return DEFAULT_BRIGHTNESS
    percent = _finite(percent)
    if percent > 0:
        return percent if percent < 1.0 else percent / 100.0
    factor = -percent
    if factor > 1.0:
        factor /= 100.0
    return factor


# ── Contrast (multiplicative family) ─────────────────────────────────
def normalize_contrast(alpha: Optional[float], mode: ContrastMode) -> float:
    """
    Turn a lessContrast/moreContrast argument into a contrast factor.

    Values on the "wrong" side of 1.0 are read as a strength and inverted:
    lessContrast(4) → 0.25, moreContrast(0.25) → 4.0.
    None and 0 both give the neutral factor 1.0.
    """
    mode = ContrastMode(mode)
    if alpha is None or alpha == 0:
        return NEUTRAL_CONTRAST
    alpha = _finite(alpha)
    if mode is ContrastMode.LESS:
        return 1.0 / alpha if alpha > 1.0 else alpha
    return alpha if alpha > 1.0 else 1.0 / alpha


def normalize_contrast_primitive(alpha: Optional[float]) -> float:
    """changeContrast's own rule: None → 2.0, negatives → their magnitude."""
    if alpha is None:
        return DEFAULT_CONTRAST_PRIMITIVE
    alpha = _finite(alpha)
    return alpha if alpha >= 0.0 else -alpha


def resolve_contrast(alpha, mode: ContrastMode) -> float:
    """
    Factor for the lessContrast/moreContrast session calls.

    NO_ARGUMENT picks the fixed convenience default (0.5 / 2.0); anything
    else, None included, goes through normalize_contrast.
    """
    mode = ContrastMode(mode)
    if alpha is NO_ARGUMENT:
        return DEFAULT_LESS_CONTRAST if mode is ContrastMode.LESS else DEFAULT_MORE_CONTRAST
    return normalize_contrast(alpha, mode)


def resolve_brightness(percent) -> float:
    if percent is NO_ARGUMENT:
        return DEFAULT_BRIGHTNESS
    return normalize_brightness(percent)
