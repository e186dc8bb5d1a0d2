from pathlib import Path

VERSION_FILE = Path(__file__).resolve().parents[1] / "VERSION"

def read_version() -> str:
    """Read the semantic version from the VERSION file at repo root."""
    try:
        return VERSION_FILE.read_text(encoding="utf-8").strip() or "0.0.0"
    except OSError:
        return "0.0.0"
