"""Containment checks between directories and files"""

from pathlib import Path

from trydocs.core.directory import DirectoryAccessor


def is_base_of(parent: Path, child: Path, self_is_child: bool) -> bool:
    """Return True when every segment of parent prefixes child's segments.

    When self_is_child is False, parent == child does not count as containment.
    """
    parent_parts = Path(parent).resolve().parts
    child_parts = Path(child).resolve().parts
    if not self_is_child and parent_parts == child_parts:
        return False
    return child_parts[:len(parent_parts)] == parent_parts


def is_subdirectory_of(potential_child: DirectoryAccessor, directory: DirectoryAccessor) -> bool:
    """True when potential_child is nested under directory (equal roots are not nested)."""
    return is_base_of(
        directory.get_fully_qualified_root(),
        potential_child.get_fully_qualified_root(),
        self_is_child=False,
    )


def is_child_of(file: Path, directory: DirectoryAccessor) -> bool:
    """True when the file's own directory is directory or lies beneath it."""
    return is_base_of(
        directory.get_fully_qualified_root(),
        Path(file).resolve().parent,
        self_is_child=True,
    )
