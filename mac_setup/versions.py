import re
from typing import Iterable, Optional, Tuple


def parse_version(version: str) -> Tuple[int, ...]:
    """Turn ``"3.11.0"`` into ``(3, 11, 0)`` for numeric comparison."""
    return tuple(int(part) for part in version.strip().lstrip("v").split("."))


def matching_versions(lines: Iterable[str], pattern: str) -> list:
    """
    Collect versions from a version manager's listing.

    ``pattern`` is matched per line; its first group (or the whole match when
    there is no group) is the version string.
    """
    regex = re.compile(pattern)
    found = []
    for line in lines:
        m = regex.match(line)
        if not m:
            continue
        found.append((m.group(1) if regex.groups else m.group(0)).strip())
    return found


def latest_version(lines: Iterable[str], pattern: str) -> Optional[str]:
    """
    Return the numerically highest version matching ``pattern``.

    Listings are not trusted to be ordered: ``3.9.9`` sorts after ``3.11.0``
    as text, so versions are compared as integer tuples.
    """
    versions = matching_versions(lines, pattern)
    if not versions:
        return None
    return max(versions, key=parse_version)
