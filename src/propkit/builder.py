"""Build steps for one package.

Each step reads the package manifest and source tree under ``root``, writes
its outputs relative to ``root`` and returns a ``StepResult`` naming what it
produced. Steps never print; the CLI hands their results to the reporter.

Steps:
- make_proxies: entry-point folders with a proxy package.json
- make_gitignore: .gitignore listing every build output folder
- clean_build: remove build output folders
- make_playground_deps: dependency map for a playground package
- inject_prop_types: prop tables under the README props heading
- make_keys: deduplicated key-list module per module directory
- make_tsconfig_prod: production tsconfig swap with a restore callback
"""

import json
import logging
import posixpath
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

from propkit.aggregation import collect_module_props
from propkit.config import PropkitConfig
from propkit.discovery import (
    get_build_folders,
    get_proxy_folders,
    get_public_files,
    get_public_files_by_modules,
    get_readme_paths,
    get_root_modules,
    get_source_path,
)
from propkit.exceptions import InjectionError, TypeQueryError
from propkit.formatter import format_typescript
from propkit.keys import collect_module_keys, normalize_keys, render_keys_module
from propkit.manifest import MANIFEST_FILENAME, PackageManifest
from propkit.markdown import find_heading, has_props_heading, inject_section, render_prop_types_markdown
from propkit.reporter import StepResult
from propkit.shutdown import CleanupRegistry
from propkit.typequery import Project

logger = logging.getLogger(__name__)

GITIGNORE_HEADER = "# Automatically generated"
PROD_TSCONFIG = "tsconfig.prod.json"
PROD_EXCLUDE = "src/**/__*"
MIN_MODULE_HEADING_LEVEL = 3
PLAYGROUND_DEPS_DIR = "__deps"
PLAYGROUND_DEPS_HEADER = "/* eslint-disable */\n// Automatically generated\n"


def _config(config: PropkitConfig | None) -> PropkitConfig:
    return config if config is not None else PropkitConfig()


# ----------------------------------------------------------------------------
# Proxies, .gitignore and clean
# ----------------------------------------------------------------------------


def get_proxy_package_contents(manifest: PackageManifest, module_name: str) -> str:
    """Proxy ``package.json`` pointing back at the real build outputs.

    Example:
        >>> print(get_proxy_package_contents(manifest, "Button"))
        {
          "name": "reakit/Button",
          "private": true,
          "sideEffects": false,
          "main": "../lib/Button",
          "module": "../es/Button",
          "types": "../ts/Button"
        }
    """
    prefix = "../" * len(module_name.split("/"))

    def relative(directory: str) -> str:
        return posixpath.normpath(posixpath.join(prefix, directory, module_name))

    contents = {
        "name": f"{manifest.name}/{module_name}",
        "private": True,
        "sideEffects": False,
        "main": relative(manifest.main_dir),
    }
    if manifest.module_dir:
        contents["module"] = relative(manifest.module_dir)
    if manifest.types_dir:
        contents["types"] = relative(manifest.types_dir)
    return json.dumps(contents, indent=2, ensure_ascii=False)


def make_proxies(root: Path, config: PropkitConfig | None = None) -> StepResult:
    """Write a proxy ``package.json`` into every proxy folder."""
    config = _config(config)
    root = Path(root)
    manifest = PackageManifest.load(root)
    result = StepResult(manifest.name, "Created proxies")

    if not manifest.main_dir:
        logger.debug(f"{manifest.name} has no main entry, skipping proxies")
        return result

    for name in get_proxy_folders(root, config.source_dir):
        folder = root / name
        folder.mkdir(parents=True, exist_ok=True)
        (folder / MANIFEST_FILENAME).write_text(get_proxy_package_contents(manifest, name), encoding="utf-8")
        result.items.append(name)

    return result


def get_gitignore_contents(build_folders: list[str]) -> str:
    lines = [GITIGNORE_HEADER] + [f"/{name}" for name in sorted(get_root_modules(build_folders))]
    return "\n".join(lines) + "\n"


def make_gitignore(root: Path, config: PropkitConfig | None = None) -> StepResult:
    config = _config(config)
    root = Path(root)
    manifest = PackageManifest.load(root)
    build_folders = get_build_folders(root, manifest, config.source_dir)
    (root / ".gitignore").write_text(get_gitignore_contents(build_folders), encoding="utf-8")
    return StepResult(manifest.name, "Created", [".gitignore"])


def clean_build(root: Path, config: PropkitConfig | None = None) -> StepResult:
    """Remove every top-level build output folder that exists."""
    config = _config(config)
    root = Path(root)
    manifest = PackageManifest.load(root)
    result = StepResult(manifest.name, "Cleaned", style="bold bright_black")

    for name in get_root_modules(get_build_folders(root, manifest, config.source_dir)):
        path = root / name
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
        else:
            continue
        logger.debug(f"Removed {path}")
        result.items.append(name)

    return result


# ----------------------------------------------------------------------------
# Playground dependency map
# ----------------------------------------------------------------------------


def get_short_name(package_name: str) -> str:
    """Drop the scope of a scoped package name (``@scope/name`` -> ``name``)."""
    parts = package_name.split("/")
    return parts[1] if len(parts) > 1 and parts[1] else package_name


def get_playground_deps_contents(name: str, folders: list[str]) -> str:
    """Module mapping the package and each of its source folders to a ``require``.

    Example:
        >>> print(get_playground_deps_contents("reakit", ["Checkbox"]))
        /* eslint-disable */
        // Automatically generated
        export default {
          "reakit": require("reakit"),
          "reakit/Checkbox": require("reakit/Checkbox")
        };
    """
    modules = [name] + [posixpath.normpath(posixpath.join(name, folder)) for folder in sorted(folders)]
    entries = ",\n".join(f'  "{module}": require("{module}")' for module in modules)
    return f"{PLAYGROUND_DEPS_HEADER}export default {{\n{entries}\n}};\n"


def make_playground_deps(root: Path, config: PropkitConfig | None = None) -> StepResult:
    """Write the package's dependency map into the configured playground."""
    config = _config(config)
    root = Path(root)
    manifest = PackageManifest.load(root)

    if not config.playground_dir:
        logger.debug(f"No playground configured for {manifest.name}")
        return StepResult(manifest.name, "Created")

    playground = (root / config.playground_dir).resolve()
    name = get_short_name(manifest.name)
    output_dirs = manifest.output_dirs
    folders = [
        folder for folder in get_build_folders(root, manifest, config.source_dir) if folder not in output_dirs
    ]

    deps_dir = get_source_path(playground) / PLAYGROUND_DEPS_DIR
    deps_dir.mkdir(parents=True, exist_ok=True)
    (deps_dir / f"{name}.ts").write_text(get_playground_deps_contents(name, folders), encoding="utf-8")
    return StepResult(playground.name, "Created", [f"{PLAYGROUND_DEPS_DIR}/{name}.ts"])


# ----------------------------------------------------------------------------
# README prop tables
# ----------------------------------------------------------------------------


def _create_project(root: Path, config: PropkitConfig) -> Project:
    return Project(tsconfig_path=root / config.tsconfig)


def inject_prop_types(root: Path, config: PropkitConfig | None = None) -> StepResult:
    """Regenerate the props section of every module README.

    READMEs without a props heading are skipped. A README whose section
    cannot be injected is left untouched and left out of the result.

    Raises:
        ManifestError: If package.json cannot be read
        TypeQueryError: If the package has no tsconfig
    """
    config = _config(config)
    root = Path(root)
    manifest = PackageManifest.load(root)
    result = StepResult(manifest.name, "Injected prop types")
    project = _create_project(root, config)

    for readme_path in get_readme_paths(root, config.source_dir):
        markdown = readme_path.read_text(encoding="utf-8")
        if not has_props_heading(markdown, config.props_heading):
            continue

        module_dir = readme_path.parent
        source_files = project.add_source_files_at_paths(list(get_public_files(module_dir).values()))
        project.resolve_source_file_dependencies()
        prop_map = collect_module_props(project, source_files)

        heading = find_heading(markdown, config.props_heading)
        level = max(MIN_MODULE_HEADING_LEVEL, heading.level + 1) if heading else MIN_MODULE_HEADING_LEVEL
        fragment = render_prop_types_markdown(prop_map, level)

        try:
            updated = inject_section(markdown, config.props_heading, fragment)
        except InjectionError as e:
            logger.debug(f"Skipping {readme_path}: {e}")
            continue

        readme_path.write_text(updated.lstrip(), encoding="utf-8")
        result.items.append(module_dir.name)

    return result


# ----------------------------------------------------------------------------
# Key modules
# ----------------------------------------------------------------------------


def make_keys(root: Path, config: PropkitConfig | None = None) -> StepResult:
    """Write a key-list module into every module directory that has keys.

    Raises:
        ManifestError: If package.json cannot be read
        TypeQueryError: If the package has no tsconfig
    """
    config = _config(config)
    root = Path(root)
    manifest = PackageManifest.load(root)
    result = StepResult(manifest.name, "Generated keys")

    if not config.allows_keys(manifest.name):
        logger.debug(f"Key generation not enabled for {manifest.name}")
        return result

    source_path = get_source_path(root, config.source_dir)
    if not source_path.is_dir():
        return result

    project = _create_project(root, config)

    for module_path, paths in get_public_files_by_modules(source_path).items():
        source_files = project.add_source_files_at_paths(paths)
        entries = collect_module_keys(project, source_files)
        if not entries:
            continue

        contents = render_keys_module(normalize_keys(entries))
        module_dir = Path(module_path)
        (module_dir / config.keys_filename).write_text(
            format_typescript(contents, config.line_width), encoding="utf-8"
        )
        result.items.append(module_dir.name)

    return result


# ----------------------------------------------------------------------------
# Production tsconfig
# ----------------------------------------------------------------------------


def has_tsconfig(root: Path, config: PropkitConfig | None = None) -> bool:
    return (Path(root) / _config(config).tsconfig).is_file()


def make_tsconfig_prod(root: Path, config: PropkitConfig | None = None) -> Callable[[], None]:
    """Rewrite tsconfig for a production type build.

    ``extends`` is pointed at the production base config and private
    modules (``src/**/__*``) are excluded.

    Returns:
        Callback writing the original bytes back

    Raises:
        TypeQueryError: If the tsconfig is not a JSON object
    """
    path = Path(root) / _config(config).tsconfig
    original = path.read_bytes()
    try:
        data = json.loads(original)
    except json.JSONDecodeError as e:
        raise TypeQueryError(f"Cannot parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise TypeQueryError(f"{path} must contain a JSON object")

    if isinstance(data.get("extends"), str):
        data["extends"] = data["extends"].replace("tsconfig.json", PROD_TSCONFIG)
    exclude = list(data.get("exclude") or [])
    if PROD_EXCLUDE not in exclude:
        exclude.append(PROD_EXCLUDE)
    data["exclude"] = exclude

    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug(f"Switched {path} to production settings")

    def restore_tsconfig() -> None:
        path.write_bytes(original)
        logger.debug(f"Restored {path}")

    return restore_tsconfig


def run_with_prod_tsconfig(
    root: Path,
    command: list[str],
    registry: CleanupRegistry,
    config: PropkitConfig | None = None,
) -> int:
    """Run a type-build command with the production tsconfig in place.

    The restore callback is registered with ``registry`` for the duration of
    the command so an interrupted build still restores the file.

    Returns:
        The command's exit code
    """
    root = Path(root)
    if not has_tsconfig(root, config):
        logger.debug(f"No tsconfig in {root}, running command unchanged")
        return subprocess.run(command, cwd=root, check=False).returncode

    restore = registry.register(make_tsconfig_prod(root, config))
    try:
        return subprocess.run(command, cwd=root, check=False).returncode
    finally:
        registry.unregister(restore)
        restore()


GENERATE_STEPS = (make_proxies, make_gitignore, make_playground_deps, inject_prop_types, make_keys)


__all__ = [
    "GENERATE_STEPS",
    "clean_build",
    "get_gitignore_contents",
    "get_playground_deps_contents",
    "get_proxy_package_contents",
    "get_short_name",
    "has_tsconfig",
    "inject_prop_types",
    "make_gitignore",
    "make_keys",
    "make_playground_deps",
    "make_proxies",
    "make_tsconfig_prod",
    "run_with_prod_tsconfig",
]
