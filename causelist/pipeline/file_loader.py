from pathlib import Path

from causelist.pipeline.exceptions import FileReadError
from causelist.pipeline.models import Document


class FileLoader:
    """Reads a document from disk into an in-memory Document."""

    SUPPORTED_SUFFIXES = frozenset({".pdf"})

    def load(self, path: Path) -> Document:
        """Read document bytes; the file name becomes the document name.

        Raises:
            FileNotFoundError: if the file does not exist.
            FileReadError: if the path is not a PDF file or cannot be read.
        """
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not path.is_file() or path.suffix.lower() not in self.SUPPORTED_SUFFIXES:
            raise FileReadError(f"Not a PDF file: {path}")
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Failed to read {path}: {exc}") from exc
        return Document(name=path.name, content=content)
