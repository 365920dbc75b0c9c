"""
Filter Pipeline
Resolves filter names to session transforms and applies them in order.
Every recognised name runs its transform with default parameters.
"""

import logging
from typing import Iterable, Union

from ..models.filter_name import FilterName

logger = logging.getLogger(__name__)

# FilterName → zero-argument session call
_DISPATCH = {
    FilterName.LIGHTEN: lambda session: session.lighten(),
    FilterName.DARKEN: lambda session: session.darken(),
    FilterName.LESS_CONTRAST: lambda session: session.less_contrast(),
    FilterName.MORE_CONTRAST: lambda session: session.more_contrast(),
    FilterName.GREY_SCALE: lambda session: session.grey_scale(),
}


def apply_filter(session, name: Union[str, FilterName], *, strict: bool = False):
    """
    Apply a single named filter.

    Args:
        session: ImageSession to transform
        name: One of the FilterName values, e.g. "moreContrast"
        strict: Raise UnknownFilterError for unknown names instead of skipping them

    Returns:
        ImageSession: The transformed session, or *session* itself for an
        unknown name in non-strict mode
    """
    filter_name = FilterName.parse(name, strict=strict)
    if filter_name is None:
        logger.warning("Ignoring unknown filter name %r", name)
        return session
    logger.debug("Applying filter %s", filter_name.value)
    return _DISPATCH[filter_name](session)


def apply_by_name(session, names: Union[str, FilterName, Iterable[str]], *, strict: bool = False):
    """
    Apply one filter name, or an ordered sequence of them left to right.

    Args:
        session: ImageSession to transform
        names: A single name or an iterable of names
        strict: Fail on the first unknown name instead of skipping it

    Returns:
        ImageSession: Result of the last step
    """
    if isinstance(names, (str, FilterName)):
        return apply_filter(session, names, strict=strict)

    names = list(names)
    if strict:
        # Validate up front so a bad name late in the chain wastes no work.
        for name in names:
            FilterName.parse(name, strict=True)

    result = session
    for name in names:
        result = apply_filter(result, name, strict=strict)
    return result


def parse_filter_chain(names: Iterable[str], *, strict: bool = False) -> list:
    """Return the recognised FilterNames in *names*, in order."""
    chain = []
    for name in names:
        parsed = FilterName.parse(name, strict=strict)
        if parsed is not None:
            chain.append(parsed)
    return chain
