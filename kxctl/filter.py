"""Selection of kubectl contexts by include and exclude patterns."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence


def match_pattern(s: str, pattern: str) -> bool:
    """Return True if ``s`` matches ``pattern``.

    A pattern wrapped in slashes (``/regex/``) is a regular expression that
    is searched for anywhere in ``s``; an invalid expression matches nothing.
    Any other pattern is a plain substring.
    """
    if pattern.startswith("/") and pattern.endswith("/"):
        try:
            return re.search(pattern[1:-1], s) is not None
        except re.error:
            return False
    return pattern in s


def _matches_filters(context: str, include: Sequence[str], exclude: Sequence[str]) -> bool:
    if include and not any(match_pattern(context, pattern) for pattern in include):
        return False
    return not any(match_pattern(context, pattern) for pattern in exclude)


def filter_contexts(
    contexts: Iterable[str],
    include: Sequence[str] | None,
    exclude: Sequence[str] | None,
) -> list[str]:
    """Keep the contexts that match an include pattern and no exclude pattern.

    With no include patterns every context counts as included; with no
    patterns at all the contexts are returned unchanged.
    """
    include = list(include or ())
    exclude = list(exclude or ())
    contexts = list(contexts)
    if not include and not exclude:
        return contexts
    return [ctx for ctx in contexts if _matches_filters(ctx, include, exclude)]