from __future__ import annotations
from enum import Enum
from typing import Optional

from ..errors import UnknownFilterError


class FilterName(str, Enum):
    """The closed set of filters that can be dispatched by name."""
    LIGHTEN = "lighten"
    DARKEN = "darken"
    LESS_CONTRAST = "lessContrast"
    MORE_CONTRAST = "moreContrast"
    GREY_SCALE = "greyScale"

    @classmethod
    def parse(cls, name, strict: bool = False) -> Optional["FilterName"]:
        """
        Resolve *name* to a FilterName.

        Unknown names give None, or raise UnknownFilterError when *strict*.
        Matching is exact: "GreyScale" or ".greyScale" are unknown.
        """
        if isinstance(name, cls):
            return name
        try:
            return cls(name)
        except ValueError:
            if strict:
                raise UnknownFilterError(name) from None
            return None

    @classmethod
    def names(cls):
        return [member.value for member in cls]
