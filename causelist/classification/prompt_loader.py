from pathlib import Path

from causelist.classification.exceptions import ClassificationError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def _read_resource(path: Path, what: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ClassificationError(f"Failed to load {what}: {exc}") from exc


def load_prompt_template(path: Path | None = None) -> str:
    """Load the per-page prompt template.

    Args:
        path: Path to the template file.
              Defaults to the bundled classification_prompt.txt.

    Returns:
        The raw template string with {page_index}, {page_text} and
        {json_schema} placeholders.

    Raises:
        ClassificationError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "classification_prompt.txt"
    return _read_resource(path, "prompt template")


def load_system_prompt(path: Path | None = None) -> str:
    """Load the system instruction sent with every page."""
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "system_prompt.txt"
    return _read_resource(path, "system prompt").strip()


def load_json_schema(path: Path | None = None) -> str:
    """Load the JSON schema describing one page's response.

    Raises:
        ClassificationError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "classification_schema.json"
    return _read_resource(path, "JSON schema")
