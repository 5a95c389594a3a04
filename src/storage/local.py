from pathlib import Path

from .base import BaseStorage


class LocalStorage(BaseStorage):
    """Artifact storage on the local filesystem."""

    def create_workspace(self, workspace: Path) -> Path:
        workspace = Path(workspace)
        try:
            workspace.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RuntimeError(f"Error creating output directory {workspace}: {e}")
        return workspace

    def file_exist(self, workspace: Path, filename: str) -> bool:
        return (Path(workspace) / filename).is_file()

    def save_file(self, workspace: Path, filename: str, content: str) -> Path:
        """Write ``content`` with exclusive creation ("x" mode).

        A concurrent writer that created the file first makes this raise
        FileExistsError instead of overwriting it.
        """
        filepath = Path(workspace) / filename
        with open(filepath, "x", encoding="utf-8", newline="\n") as file:
            file.write(content)
        return filepath

    def list_files(self, workspace: Path) -> list[str]:
        workspace = Path(workspace)
        if not workspace.is_dir():
            return []
        return sorted(p.name for p in workspace.iterdir() if p.is_file())
