"""Directory accessor: resolve, list, and create paths under a fixed root"""

from pathlib import Path


class DirectoryAccessor:
    """Filesystem access rooted at a single directory.

    All relative paths are resolved against the root; the root itself is
    resolved lazily so a missing target directory is fine until written to.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"DirectoryAccessor({str(self.root)!r})"

    def get_fully_qualified_root(self) -> Path:
        return self.root.expanduser().resolve()

    def get_fully_qualified_path(self, relative: Path | str = ".") -> Path:
        """Return the absolute path of relative under the root."""
        return (self.get_fully_qualified_root() / relative).resolve()

    def read_all_text(self, relative: Path | str) -> str:
        return self.get_fully_qualified_path(relative).read_text(encoding="utf-8")

    def get_all_files_recursively(self) -> list[Path]:
        """Return every file under the root as a sorted list of root-relative paths."""
        root = self.get_fully_qualified_root()
        if not root.is_dir():
            return []
        return sorted(p.relative_to(root) for p in root.rglob("*") if p.is_file())

    def ensure_directory_exists(self, relative: Path | str = ".") -> Path:
        """Create the directory (and parents) for relative; returns the absolute path."""
        path = self.get_fully_qualified_path(relative)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def ensure_parent_exists(self, relative_file: Path | str) -> Path:
        """Create the directory chain that will hold relative_file."""
        return self.ensure_directory_exists(Path(relative_file).parent)
