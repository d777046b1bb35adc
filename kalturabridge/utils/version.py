"""Version Utilities Module."""

from pathlib import Path

import tomlkit

PYPROJECT_PATH = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_pyproject_version(toml_file: Path = PYPROJECT_PATH) -> str:
    """Get KalturaBridge's version from the pyproject.toml file.

    Args:
        toml_file (Path): Location of the pyproject.toml file.

    Returns:
        str: KalturaBridge's version, or "unknown" if it cannot be determined
    """
    if not toml_file.is_file():
        return "unknown"

    with toml_file.open(encoding="utf-8") as f:
        toml_data = tomlkit.load(f)

    project = toml_data.get("project", {})
    return str(project.get("version", "unknown"))
