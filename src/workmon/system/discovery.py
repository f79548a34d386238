"""
Process tree discovery.

Breadth-first expansion of a workload's process tree starting at its root.
Discovery only ever adds identifiers: everything the caller already knew is
carried into the result even when those processes have since exited.
"""

import logging
from collections import deque
from typing import TYPE_CHECKING, Callable, Deque, Iterable, Optional, Set

import psutil

from ..models.process import TrackedSet
from .errors import DiscoveryError, ProcessNotFound
from .processes import resolve_process

if TYPE_CHECKING:
    from .processes import HandleCache

logger = logging.getLogger(__name__)


def discover_tree(
    root_pid: int,
    previously_known: Iterable[int] = (),
    cache: Optional["HandleCache"] = None,
    resolver: Callable[[int], psutil.Process] = resolve_process,
) -> TrackedSet:
    """
    Collect the identifiers of a root process and all of its descendants.

    Args:
        root_pid: Identifier of the tree's root.
        previously_known: Identifiers found by earlier calls. They are always
            part of the result, resolvable or not.
        cache: Optional handle cache. The root is resolved through it and
            newly listed children are remembered in it, so the sampler does
            not have to resolve them again.
        resolver: Resolution function used when no cache is given.

    Returns:
        A TrackedSet holding `previously_known` followed by newly discovered
        identifiers in breadth-first order.

    Raises:
        DiscoveryError: If listing the children of a live member fails for a
            reason other than the member having exited. Its `partial`
            attribute holds what was found up to that point.
    """
    result = TrackedSet(previously_known)

    try:
        root = cache.get(root_pid) if cache is not None else resolver(root_pid)
    except ProcessNotFound:
        logger.debug(f"Root PID {root_pid} is gone, keeping {len(result)} known PIDs")
        return result

    result.add(root_pid)
    expanded: Set[int] = {root_pid}
    queue: Deque[psutil.Process] = deque([root])

    while queue:
        process = queue.popleft()
        try:
            children = process.children()
        except psutil.NoSuchProcess:
            # Exited while we were walking; its children were re-parented.
            logger.debug(f"PID {process.pid} exited during discovery")
            continue
        except psutil.Error as e:
            raise DiscoveryError(process.pid, e, partial=result) from e

        for child in children:
            if child.pid in expanded:
                continue
            expanded.add(child.pid)
            result.add(child.pid)
            if cache is not None:
                cache.remember(child)
            queue.append(child)

    return result
