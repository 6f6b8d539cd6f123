"""Path and text helpers used by the CLI and service."""

from pathlib import Path

GENERATED_SUFFIX = "_generated"


def derive_output_path(input_path: str | Path, suffix: str = GENERATED_SUFFIX) -> Path:
    """
    Return the output path for an input image by inserting a suffix before the extension.

    Examples:
        assets/cat.png -> assets/cat_generated.png
        assets/cat -> assets/cat_generated
    """
    path = Path(input_path)
    return path.with_name(f"{path.stem}{suffix}{path.suffix}")


def truncate(text: str, limit: int) -> str:
    """Return at most ``limit`` characters of ``text``, marking the cut with '...'."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def load_prompt(value: str) -> tuple[str, Path | None]:
    """
    Resolve a prompt argument that may be a path to a prompt file.

    Returns:
        (prompt text, source file or None when the value was used verbatim)
    """
    candidate = Path(value)
    try:
        is_file = candidate.is_file()
    except (OSError, ValueError):
        # Long prompts can exceed path limits
        is_file = False

    if not is_file:
        return value, None
    return candidate.read_text(encoding="utf-8"), candidate
