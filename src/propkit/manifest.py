"""Package manifest (package.json) reading.

Output locations come from the manifest: ``main``, ``module``, ``unpkg``
and ``types``/``typings``. A location pointing at a ``.js``/``.ts`` file is
reduced to its directory. Absent fields resolve to ``None`` and every
output depending on them is skipped.
"""

import json
import logging
import posixpath
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from propkit.exceptions import ManifestError

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"

_FILE_PATH_RE = re.compile(r"\.(t|j)s$")


def resolve_dir(path: str | None) -> str | None:
    """Convert ``./path/to/file.js`` to ``path/to``.

    Example:
        >>> resolve_dir("lib/index.js")
        'lib'
        >>> resolve_dir("es")
        'es'
    """
    if not path:
        return None
    if _FILE_PATH_RE.search(path):
        path = posixpath.dirname(path)
    normalized = posixpath.normpath(path.replace("\\", "/"))
    return None if normalized in ("", ".") else normalized


@dataclass
class PackageManifest:
    """The fields of a package manifest used by the build tooling.

    Attributes:
        name: Package name
        main: Entry file for CommonJS consumers
        module: Entry file for ES module consumers
        unpkg: UMD bundle location
        types: Type declarations location (``types`` or ``typings``)
        raw: The parsed manifest
    """

    name: str
    main: str | None = None
    module: str | None = None
    unpkg: str | None = None
    types: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PackageManifest":
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ManifestError("Package manifest has no name")
        return cls(
            name=name,
            main=data.get("main"),
            module=data.get("module"),
            unpkg=data.get("unpkg"),
            types=data.get("types") or data.get("typings"),
            raw=data,
        )

    @classmethod
    def load(cls, root: Path) -> "PackageManifest":
        """Read ``package.json`` from a package root.

        Raises:
            ManifestError: If the manifest is missing or not valid JSON
        """
        path = Path(root) / MANIFEST_FILENAME
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ManifestError(f"No {MANIFEST_FILENAME} in {root}") from e
        except json.JSONDecodeError as e:
            raise ManifestError(f"Invalid {MANIFEST_FILENAME} in {root}: {e}") from e
        if not isinstance(data, dict):
            raise ManifestError(f"{path} must contain a JSON object")
        logger.debug(f"Loaded manifest for {data.get('name')} from {path}")
        return cls.from_dict(data)

    @property
    def main_dir(self) -> str | None:
        return resolve_dir(self.main)

    @property
    def module_dir(self) -> str | None:
        return resolve_dir(self.module)

    @property
    def unpkg_dir(self) -> str | None:
        return resolve_dir(self.unpkg)

    @property
    def types_dir(self) -> str | None:
        return resolve_dir(self.types)

    @property
    def output_dirs(self) -> list[str]:
        """Output directories in build order, skipping absent ones."""
        dirs = [self.main_dir, self.unpkg_dir, self.module_dir, self.types_dir]
        return [d for d in dirs if d]


__all__ = ["MANIFEST_FILENAME", "PackageManifest", "resolve_dir"]
