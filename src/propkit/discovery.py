"""Public module discovery.

Walks a package source tree and derives the module paths that the build
tooling works with: public files, proxy folders, build output folders and
module READMEs. Directory listings are always sorted and paths always use
``/`` so results are identical on every platform.
"""

import logging
import posixpath
import re
from pathlib import Path

from propkit.manifest import PackageManifest

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_DIR = "src"
README_FILENAME = "README.md"
PRIVATE_PREFIX = "__"

_SCRIPT_RE = re.compile(r"\.(j|t)sx?$")
_EXT_RE = re.compile(r"\.[^.]+$")
_INDEX_SUFFIX_RE = re.compile(r"/index$")


def normalize_path(path) -> str:
    """Use forward slashes regardless of platform."""
    return str(path).replace("\\", "/")


def remove_ext(path: str) -> str:
    return _EXT_RE.sub("", path)


def is_public_module(root: Path, filename: str) -> bool:
    """Directories and JS/TS files whose name does not start with ``__``."""
    if filename.startswith(PRIVATE_PREFIX):
        return False
    if (Path(root) / filename).is_dir():
        return True
    return bool(_SCRIPT_RE.search(filename))


def get_public_files(root: Path, prefix: str = "") -> dict[str, str]:
    """Map module paths (no extension) to file paths, in sorted traversal order.

    Example:
        >>> get_public_files(Path("src"))
        {'Button/Button': 'src/Button/Button.tsx', 'index': 'src/index.ts'}
    """
    root = Path(root)
    files: dict[str, str] = {}
    for filename in sorted(name.name for name in root.iterdir()):
        if not is_public_module(root, filename):
            continue
        path = root / filename
        module_path = posixpath.join(prefix, filename) if prefix else filename
        if path.is_dir():
            for key, value in get_public_files(path, module_path).items():
                files.setdefault(key, value)
        else:
            files.setdefault(remove_ext(normalize_path(module_path)), normalize_path(path))
    return files


def get_public_files_by_modules(root: Path) -> dict[str, list[str]]:
    """Group public file paths by their containing directory."""
    modules: dict[str, list[str]] = {}
    for path in get_public_files(root).values():
        modules.setdefault(posixpath.dirname(path), []).append(path)
    return modules


def get_source_path(root: Path, source_dir: str = DEFAULT_SOURCE_DIR) -> Path:
    return Path(root) / source_dir


def get_proxy_folders(root: Path, source_dir: str = DEFAULT_SOURCE_DIR) -> list[str]:
    """Module paths that get an entry-point folder, e.g. ``["Button", "utils/dom"]``."""
    source_path = get_source_path(root, source_dir)
    if not source_path.is_dir():
        logger.debug(f"No source directory at {source_path}")
        return []
    folders: list[str] = []
    for name in get_public_files(source_path):
        folder = _INDEX_SUFFIX_RE.sub("", name)
        if folder != "index" and folder not in folders:
            folders.append(folder)
    return folders


def get_build_folders(
    root: Path,
    manifest: PackageManifest,
    source_dir: str = DEFAULT_SOURCE_DIR,
) -> list[str]:
    """Output directories from the manifest followed by the proxy folders."""
    return manifest.output_dirs + get_proxy_folders(root, source_dir)


def _first_segment(path: str) -> str:
    return path.split("/", 1)[0]


def is_root_module(path: str, paths: list[str]) -> bool:
    """Whether ``path`` is a top-level folder or lives under an unlisted one."""
    root = _first_segment(path)
    return path == root or root not in paths


def get_root_modules(paths: list[str]) -> list[str]:
    return [path for path in paths if is_root_module(path, paths)]


def get_readme_paths(root: Path, source_dir: str = DEFAULT_SOURCE_DIR) -> list[Path]:
    """READMEs living next to public source files, in traversal order."""
    source_path = get_source_path(root, source_dir)
    if not source_path.is_dir():
        return []
    readmes: list[Path] = []
    for file_path in get_public_files(source_path).values():
        readme = Path(posixpath.dirname(file_path)) / README_FILENAME
        if readme not in readmes and readme.is_file():
            readmes.append(readme)
    return readmes


__all__ = [
    "DEFAULT_SOURCE_DIR",
    "README_FILENAME",
    "get_build_folders",
    "get_proxy_folders",
    "get_public_files",
    "get_public_files_by_modules",
    "get_readme_paths",
    "get_root_modules",
    "get_source_path",
    "is_public_module",
    "is_root_module",
    "normalize_path",
    "remove_ext",
]
