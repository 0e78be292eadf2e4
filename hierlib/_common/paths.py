"""Path algebra for the materialized-path encoding.

A path is a root-first tuple of segments. Working on tuples instead of a
delimited string makes depth O(1) and prefix tests O(k) segment comparisons,
and rules out false matches such as ``1/3`` being mistaken for a prefix of
``1/30``. Text is converted only at the edges via ``parse_path`` and
``format_path``.

Everything here is pure computation and never touches a store.
"""

from typing import Hashable, Optional, Sequence, Tuple, Union

from ..errors import InvalidPathError

Path = Tuple[str, ...]
PathLike = Union[str, Sequence[Hashable]]


def parse_path(path: PathLike, separator: str = "/") -> Path:
    """Convert a path given as text or a sequence into a segment tuple.

    Segments given as a sequence are converted with ``str()``, so ``(1, 3)``
    and ``"1/3"`` name the same node.

    Args:
        path: ``"1/3/5"`` style text, or any sequence of segments
        separator: Separator used by the textual form

    Returns:
        Tuple of segments

    Raises:
        InvalidPathError: If the path or any segment is empty

    Example:
        >>> parse_path("1/3/5")
        ('1', '3', '5')
    """
    if isinstance(path, str):
        segments = tuple(path.split(separator))
    else:
        segments = tuple(str(segment) for segment in path)

    if any(segment == "" for segment in segments):
        raise InvalidPathError(f"Empty segment in path {path!r}", path)

    if not segments:
        raise InvalidPathError("Path cannot be empty", path)
    return segments


def format_path(path: Path, separator: str = "/") -> str:
    """Render a segment tuple as text."""
    return separator.join(str(segment) for segment in path)


def depth(path: Path) -> int:
    """Number of separators between the root and this node (root = 0)."""
    return len(path) - 1


def parent(path: Path) -> Optional[Path]:
    """Path with its last segment removed, or None for a root path."""
    if len(path) <= 1:
        return None
    return path[:-1]


def is_strict_prefix(prefix: Path, path: Path) -> bool:
    """Check whether ``path`` lies strictly below ``prefix``.

    The comparison is segment-aligned, not a substring match.
    """
    return len(path) > len(prefix) and path[:len(prefix)] == prefix


def relative_depth(ancestor: Path, descendant: Path) -> int:
    """Distance from ``ancestor`` down to ``descendant``."""
    return len(descendant) - len(ancestor)


def rebase(path: Path, old_prefix: Path, new_prefix: Path) -> Path:
    """Replace ``old_prefix`` at the start of ``path`` with ``new_prefix``.

    Used for splice-out removal (new prefix = parent of the removed node)
    and for subtree moves.
    """
    if path[:len(old_prefix)] != old_prefix:
        raise InvalidPathError(
            f"{format_path(path)!r} does not start with {format_path(old_prefix)!r}", path
        )
    return tuple(new_prefix) + path[len(old_prefix):]
