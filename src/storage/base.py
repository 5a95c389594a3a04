from abc import ABC, abstractmethod
from pathlib import Path


class BaseStorage(ABC):
    """
    Abstract base class for artifact storage.

    Defines the operations the pipeline needs on an output root: creating
    it, checking for an artifact, writing an artifact at most once, and
    listing what is there.
    """

    @abstractmethod
    def create_workspace(self, workspace: Path) -> Path:
        """Create the workspace directory (and parents) if needed.

        Args:
            workspace (Path): The output root.

        Returns:
            Path: The workspace path.

        Raises:
            RuntimeError: If the workspace cannot be created.
        """

    @abstractmethod
    def file_exist(self, workspace: Path, filename: str) -> bool:
        """
        Check if a file exists.

        Args:
            workspace (Path): The output root.
            filename (str): The name of the file.

        Returns:
            bool: True if the file exists, False otherwise.
        """

    @abstractmethod
    def save_file(self, workspace: Path, filename: str, content: str) -> Path:
        """Write a file, failing if it already exists.

        Args:
            workspace (Path): The output root.
            filename (str): The name of the file to save.
            content (str): The text content.

        Returns:
            Path: The path of the saved file.

        Raises:
            FileExistsError: If the file already exists.
            OSError: On any other write failure.
        """

    @abstractmethod
    def list_files(self, workspace: Path) -> list[str]:
        """List file names in the workspace, sorted."""
