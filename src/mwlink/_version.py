import importlib.metadata
import logging
import os
from pathlib import Path

import toml

logger = logging.getLogger(__name__)


def find_pyproject_toml():
    pyproject_override = os.getenv("MWLINK_PYPROJECT_TOML", "")
    if pyproject_override:
        return Path(pyproject_override).resolve()

    current_dir = Path(__file__).resolve().parent

    # Check until we reach the root folder
    while current_dir != current_dir.parent:
        candidate = current_dir / "pyproject.toml"
        if candidate.exists():
            return candidate

        current_dir = current_dir.parent

    return None


def get_version_from_pyproject():
    pyproject_toml_path = find_pyproject_toml()
    if not pyproject_toml_path:
        return None
    with open(pyproject_toml_path, encoding="utf-8") as file:
        pyproject_data = toml.load(file)
    if pyproject_data.get("project", {}).get("name") != "mwlink":
        return None
    return pyproject_data["project"]["version"]


def get_version_from_package(package_name):
    try:
        return importlib.metadata.version(package_name)
    except importlib.metadata.PackageNotFoundError:
        return None


version = get_version_from_pyproject() or get_version_from_package("mwlink")
if version is None:
    logger.warning("cannot determine mwlink version")
    version = "0.0.0"
__version_info__ = tuple(map(int, version.split(".")[:3]))
display_version = __version__ = version
