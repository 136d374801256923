from __future__ import annotations

import logging
from pathlib import Path

from ..manifest import Dependency
from .client import Vcs

logger = logging.getLogger(__name__)


def pin(vcs: Vcs, working_copy: Path, dependency: Dependency) -> tuple[str, str] | None:
    """Pin ``working_copy`` to the dependency's effective ref selector.

    Only one selector is applied: ``rev`` (hard reset), else ``tag``, else
    ``branch`` (checkout). With no selector the clone's default branch is kept.
    Returns the applied ``(kind, value)`` pair.
    """
    selector = dependency.selector
    for kind, value in dependency.ignored_selectors:
        logger.warning(
            "%s: ignoring %s %r, %s %r takes precedence",
            dependency.name,
            kind,
            value,
            *selector,
        )
    if selector is None:
        return None

    kind, value = selector
    if kind == "rev":
        vcs.reset_hard(working_copy, value)
    else:
        vcs.checkout(working_copy, value)
    logger.debug("%s pinned to %s %s", dependency.name, kind, value)
    return selector
