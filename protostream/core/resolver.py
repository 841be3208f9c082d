"""Path resolution for protocol-relative paths.

Maps a requested relative path onto each configured root without touching
the filesystem. Resolution is purely lexical: "." segments and empty
segments (repeated separators) are dropped and ".." pops the previous
segment. A ".." with nothing left to pop would climb above the root and is
rejected outright, even if later segments would lead back inside it, so
"./directory/../../../file.ext" fails although it nominally re-enters the
root.

Symbolic links are not followed; containment is lexical only.
"""

import os

from protostream.domain.entities import ResolvedPath
from protostream.domain.exceptions import ContainmentViolationError

_SEPARATORS = {"/", os.sep} | ({os.altsep} if os.altsep else set())


def split_segments(requested: str) -> list[str]:
    """Split a requested path into normalized segments.

    Args:
        requested: Path relative to a protocol root.

    Returns:
        Segments after collapsing ".", "..", and repeated separators.
        An empty list designates the root itself.

    Raises:
        ContainmentViolationError: If the path is empty, contains a NUL
            byte, or a ".." segment climbs above the root.
    """
    if not requested:
        raise ContainmentViolationError(
            "Empty path", hint="Use '.' to address the protocol root"
        )
    if "\0" in requested:
        raise ContainmentViolationError(f"Path contains a NUL byte: {requested!r}")

    raw = requested
    for separator in _SEPARATORS:
        if separator != "/":
            raw = raw.replace(separator, "/")

    segments: list[str] = []
    for segment in raw.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not segments:
                raise ContainmentViolationError(
                    f"Path '{requested}' escapes the protocol root",
                    hint="Paths may not use '..' to leave the protocol root",
                )
            segments.pop()
            continue
        segments.append(segment)
    return segments


def is_contained(root: str, candidate: str) -> bool:
    """Check that candidate equals root or lies strictly below it.

    Both paths are compared in lexically normalized form. The prefix must
    end on a separator boundary so "/srv/data2" is not inside "/srv/data".

    Args:
        root: Absolute root directory.
        candidate: Absolute path to check.

    Returns:
        True if candidate is contained in root.
    """
    root = os.path.normpath(root)
    candidate = os.path.normpath(candidate)
    if candidate == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return candidate.startswith(prefix)


def candidates(roots: tuple[str, ...], requested: str) -> list[ResolvedPath]:
    """Resolve a requested path against every root, in root order.

    Args:
        roots: Absolute, normalized root directories.
        requested: Path relative to the roots.

    Returns:
        One ResolvedPath per root.

    Raises:
        ContainmentViolationError: If the path cannot be contained.
    """
    segments = split_segments(requested)
    relative = "/".join(segments) if segments else "."

    resolved = []
    for root in roots:
        path = os.path.join(root, *segments) if segments else root
        path = os.path.normpath(path)
        if not is_contained(root, path):
            raise ContainmentViolationError(
                f"Path '{requested}' escapes the protocol root"
            )
        resolved.append(ResolvedPath(root=root, path=path, relative=relative))
    return resolved


def resolve(roots: tuple[str, ...], requested: str) -> ResolvedPath:
    """Resolve a requested path against the first root.

    Args:
        roots: Absolute, normalized root directories.
        requested: Path relative to the roots.

    Returns:
        ResolvedPath under the first root.

    Raises:
        ContainmentViolationError: If the path cannot be contained or no
            roots are given.
    """
    resolved = candidates(roots, requested)
    if not resolved:
        raise ContainmentViolationError("No roots configured")
    return resolved[0]
