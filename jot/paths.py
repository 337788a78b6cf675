"""paths.py - Path resolution and display shortening.

Tracebacks and log lines show source locations, and full absolute paths make
them unreadable. ``shorten_path`` keeps only the trailing components of a path,
while ``resolve_path`` canonicalises paths so that the library can recognise
its own files regardless of symlinks or relative invocation.
"""

import os

DEFAULT_MAX_COMPONENTS = 3
FRAME_MAX_COMPONENTS = 4


def resolve_path(path: str) -> str:
    """Return the canonical form of ``path``, or ``path`` itself on failure."""
    if not path:
        return path
    try:
        return os.path.realpath(path)
    except (OSError, ValueError):
        return path


def shorten_path(path: str, max_components: int = DEFAULT_MAX_COMPONENTS) -> str:
    """Reduce ``path`` to at most ``max_components`` trailing components.

    Truncated paths are prefixed with ``.../``. Absolute paths that fit within
    the limit keep their leading ``/``.

    Args:
        path: The path to shorten. Empty strings are returned unchanged.
        max_components: Maximum number of ``/``-separated components to keep.

    Returns:
        The shortened path.

    Raises:
        ValueError: If ``max_components`` is negative.

    Example:
        >>> shorten_path("/usr/local/lib/python/site.py")
        '.../lib/python/site.py'
        >>> shorten_path("/opt/app.py")
        '/opt/app.py'
    """
    if max_components < 0:
        raise ValueError(f"max_components must be >= 0, got {max_components}")
    if not path:
        return path

    parts = path.lstrip("/").split("/")
    if len(parts) > max_components:
        kept = parts[len(parts) - max_components:] if max_components else []
        return ".../" + "/".join(kept)
    if path.startswith("/"):
        return "/" + "/".join(parts)
    return path
