"""Integration tests for the build steps against a sample package."""

import json
from unittest.mock import Mock, patch

import pytest

from propkit.builder import (
    PROD_EXCLUDE,
    clean_build,
    get_gitignore_contents,
    get_playground_deps_contents,
    get_proxy_package_contents,
    get_short_name,
    inject_prop_types,
    make_gitignore,
    make_keys,
    make_playground_deps,
    make_proxies,
    make_tsconfig_prod,
    run_with_prod_tsconfig,
)
from propkit.config import PropkitConfig
from propkit.exceptions import ManifestError, TypeQueryError
from propkit.keys import GENERATED_HEADER
from propkit.manifest import PackageManifest
from propkit.shutdown import CleanupRegistry

pytestmark = pytest.mark.integration


class TestProxies:
    """Test proxy folder generation."""

    def test_proxy_contents(self):
        manifest = PackageManifest.from_dict(
            {"name": "reakit", "main": "lib/index.js", "module": "es/index.js", "types": "ts/index.d.ts"}
        )
        assert get_proxy_package_contents(manifest, "Checkbox") == (
            "{\n"
            '  "name": "reakit/Checkbox",\n'
            '  "private": true,\n'
            '  "sideEffects": false,\n'
            '  "main": "../lib/Checkbox",\n'
            '  "module": "../es/Checkbox",\n'
            '  "types": "../ts/Checkbox"\n'
            "}"
        )

    def test_nested_proxy_contents(self):
        manifest = PackageManifest.from_dict({"name": "reakit", "main": "lib/index.js"})
        contents = json.loads(get_proxy_package_contents(manifest, "Checkbox/CheckboxState"))
        assert contents == {
            "name": "reakit/Checkbox/CheckboxState",
            "private": True,
            "sideEffects": False,
            "main": "../../lib/Checkbox/CheckboxState",
        }

    def test_make_proxies(self, sample_package):
        result = make_proxies(sample_package)
        assert result.items == ["Checkbox/Checkbox", "Checkbox/CheckboxState", "Checkbox", "Separator/Separator"]
        proxy = json.loads((sample_package / "Checkbox" / "package.json").read_text())
        assert proxy["main"] == "../lib/Checkbox"
        assert proxy["module"] == "../es/Checkbox"
        assert not (sample_package / "index").exists()
        assert not (sample_package / "__utils").exists()

    def test_no_main_entry(self, sample_package):
        (sample_package / "package.json").write_text(json.dumps({"name": "reakit-utils"}))
        assert make_proxies(sample_package).items == []
        assert not (sample_package / "Checkbox").exists()

    def test_missing_manifest(self, tmp_path):
        with pytest.raises(ManifestError):
            make_proxies(tmp_path)


class TestGitignoreAndClean:
    """Test .gitignore generation and cleaning build folders."""

    def test_gitignore_contents(self):
        contents = get_gitignore_contents(["lib", "es", "Checkbox", "Checkbox/Checkbox", "Separator/Separator"])
        assert contents == "# Automatically generated\n/Checkbox\n/Separator/Separator\n/es\n/lib\n"

    def test_make_gitignore(self, sample_package):
        result = make_gitignore(sample_package)
        assert result.items == [".gitignore"]
        assert (sample_package / ".gitignore").read_text() == (
            "# Automatically generated\n/Checkbox\n/Separator/Separator\n/dist\n/es\n/lib\n/ts\n"
        )

    def test_clean_build(self, sample_package):
        make_proxies(sample_package)
        (sample_package / "lib").mkdir()
        (sample_package / "lib" / "index.js").write_text("")
        result = clean_build(sample_package)
        assert result.items == ["lib", "Checkbox", "Separator/Separator"]
        assert not (sample_package / "lib").exists()
        assert not (sample_package / "Checkbox").exists()
        assert (sample_package / "src" / "Checkbox").is_dir()

    def test_clean_nothing_to_remove(self, sample_package):
        assert clean_build(sample_package).items == []


class TestInjectPropTypes:
    """Test README prop table injection."""

    def test_inject(self, sample_package):
        result = inject_prop_types(sample_package)
        assert result.items == ["Checkbox"]

        readme = (sample_package / "src" / "Checkbox" / "README.md").read_text()
        assert "Outdated content." not in readme
        assert "```md\n## Props\n\nHeadings inside code blocks are left alone.\n```" in readme
        assert readme.index("### `useCheckboxState`") < readme.index("### `CheckboxState`")
        assert readme.index("### `CheckboxState`") < readme.index("### `Checkbox`")
        assert "- **`checked`**\n  <code>boolean | undefined</code>\n\n  Checkbox's `checked` state." in readme
        assert "<details><summary>2 state props</summary>" in readme
        assert "unstable_clickOnEnter" not in readme
        assert readme.endswith("## Related\n\n- Radio\n")

    def test_readme_without_heading_untouched(self, sample_package):
        readme_path = sample_package / "src" / "Separator" / "README.md"
        before = readme_path.read_text()
        inject_prop_types(sample_package)
        assert readme_path.read_text() == before

    def test_idempotent(self, sample_package):
        readme_path = sample_package / "src" / "Checkbox" / "README.md"
        inject_prop_types(sample_package)
        once = readme_path.read_text()
        inject_prop_types(sample_package)
        assert readme_path.read_text() == once

    def test_custom_heading(self, sample_package):
        readme_path = sample_package / "src" / "Separator" / "README.md"
        readme_path.write_text("# Separator\n\n## API\n\nOld.\n")
        config = PropkitConfig(props_heading="API")
        result = inject_prop_types(sample_package, config)
        assert result.items == ["Separator"]
        contents = readme_path.read_text()
        assert "Old." not in contents
        assert "### `Separator`" in contents

    def test_custom_heading_ignores_default_heading(self, sample_package):
        """READMEs with only a "Props" heading are skipped when another title is configured."""
        readme_path = sample_package / "src" / "Checkbox" / "README.md"
        before = readme_path.read_text()
        result = inject_prop_types(sample_package, PropkitConfig(props_heading="API"))
        assert result.items == []
        assert readme_path.read_text() == before

    def test_missing_tsconfig(self, sample_package):
        (sample_package / "tsconfig.json").unlink()
        with pytest.raises(TypeQueryError):
            inject_prop_types(sample_package)


class TestMakeKeys:
    """Test key module generation."""

    def test_make_keys(self, sample_package):
        result = make_keys(sample_package)
        assert result.items == ["Checkbox", "Separator"]

        checkbox_keys = (sample_package / "src" / "Checkbox" / "__keys.ts").read_text()
        assert checkbox_keys == (
            GENERATED_HEADER
            + 'const CHECKBOX_STATE_KEYS = ["state", "setState"] as const;\n'
            + "export const CHECKBOX_KEYS = [\n"
            + "  ...CHECKBOX_STATE_KEYS,\n"
            + '  "value",\n'
            + '  "checked",\n'
            + '  "unstable_clickOnEnter",\n'
            + "] as const;\n"
        )
        separator_keys = (sample_package / "src" / "Separator" / "__keys.ts").read_text()
        assert separator_keys == GENERATED_HEADER + 'export const SEPARATOR_KEYS = ["orientation"] as const;\n'
        assert not (sample_package / "src" / "__keys.ts").exists()

    def test_keys_not_enabled_for_package(self, sample_package):
        config = PropkitConfig(keys_packages=["reakit-system"])
        assert make_keys(sample_package, config).items == []
        assert not (sample_package / "src" / "Checkbox" / "__keys.ts").exists()

    def test_custom_filename(self, sample_package):
        make_keys(sample_package, PropkitConfig(keys_filename="keys.ts"))
        assert (sample_package / "src" / "Separator" / "keys.ts").is_file()


class TestProdTsconfig:
    """Test the production tsconfig swap."""

    def test_swap_and_restore(self, sample_package):
        path = sample_package / "tsconfig.json"
        original = path.read_bytes()
        restore = make_tsconfig_prod(sample_package)

        data = json.loads(path.read_text())
        assert data["extends"] == "../../tsconfig.prod.json"
        assert data["exclude"] == [PROD_EXCLUDE]
        assert data["include"] == ["src"]

        restore()
        assert path.read_bytes() == original

    def test_existing_exclude_kept(self, sample_package):
        path = sample_package / "tsconfig.json"
        path.write_text(json.dumps({"exclude": ["node_modules"]}))
        make_tsconfig_prod(sample_package)
        assert json.loads(path.read_text())["exclude"] == ["node_modules", PROD_EXCLUDE]

    def test_invalid_tsconfig(self, sample_package):
        (sample_package / "tsconfig.json").write_text("[]")
        with pytest.raises(TypeQueryError):
            make_tsconfig_prod(sample_package)

    @patch("propkit.builder.subprocess.run")
    def test_run_restores_after_command(self, mock_run, sample_package):
        path = sample_package / "tsconfig.json"
        original = path.read_bytes()
        seen = {}

        def fake_run(command, cwd, check):
            seen["tsconfig"] = json.loads(path.read_text())
            return Mock(returncode=2)

        mock_run.side_effect = fake_run
        registry = CleanupRegistry()
        assert run_with_prod_tsconfig(sample_package, ["tsc"], registry) == 2
        assert seen["tsconfig"]["exclude"] == [PROD_EXCLUDE]
        assert path.read_bytes() == original
        assert len(registry) == 0

    @patch("propkit.builder.subprocess.run")
    def test_run_restores_on_error(self, mock_run, sample_package):
        path = sample_package / "tsconfig.json"
        original = path.read_bytes()
        mock_run.side_effect = KeyboardInterrupt
        with pytest.raises(KeyboardInterrupt):
            run_with_prod_tsconfig(sample_package, ["tsc"], CleanupRegistry())
        assert path.read_bytes() == original

    @patch("propkit.builder.subprocess.run")
    def test_run_without_tsconfig(self, mock_run, tmp_path):
        mock_run.return_value = Mock(returncode=0)
        assert run_with_prod_tsconfig(tmp_path, ["tsc"], CleanupRegistry()) == 0
        mock_run.assert_called_once_with(["tsc"], cwd=tmp_path, check=False)


class TestPlaygroundDeps:
    """Test the playground dependency map."""

    @pytest.mark.parametrize(
        "name,expected",
        [("reakit", "reakit"), ("@reakit/utils", "utils"), ("reakit-system", "reakit-system")],
    )
    def test_short_name(self, name, expected):
        assert get_short_name(name) == expected

    def test_contents_sorted(self):
        contents = get_playground_deps_contents("reakit", ["Separator/Separator", "Checkbox", "Checkbox/Checkbox"])
        assert contents == (
            "/* eslint-disable */\n"
            "// Automatically generated\n"
            "export default {\n"
            '  "reakit": require("reakit"),\n'
            '  "reakit/Checkbox": require("reakit/Checkbox"),\n'
            '  "reakit/Checkbox/Checkbox": require("reakit/Checkbox/Checkbox"),\n'
            '  "reakit/Separator/Separator": require("reakit/Separator/Separator")\n'
            "};\n"
        )

    def test_contents_without_folders(self):
        assert 'export default {\n  "utils": require("utils")\n};\n' in get_playground_deps_contents("utils", [])

    def test_make_playground_deps(self, sample_package):
        config = PropkitConfig(playground_dir="../reakit-playground")
        result = make_playground_deps(sample_package, config)
        assert result.package == "reakit-playground"
        assert result.items == ["__deps/reakit.ts"]

        deps_path = sample_package.parent / "reakit-playground" / "src" / "__deps" / "reakit.ts"
        contents = deps_path.read_text()
        assert '  "reakit/Checkbox": require("reakit/Checkbox"),\n' in contents
        assert '  "reakit/Checkbox/CheckboxState": require("reakit/Checkbox/CheckboxState"),\n' in contents
        for output_dir in ("lib", "es", "dist", "ts"):
            assert f'"reakit/{output_dir}"' not in contents

    def test_scoped_package(self, sample_package):
        manifest = json.loads((sample_package / "package.json").read_text())
        manifest["name"] = "@reakit/core"
        (sample_package / "package.json").write_text(json.dumps(manifest))
        make_playground_deps(sample_package, PropkitConfig(playground_dir="playground"))
        contents = (sample_package / "playground" / "src" / "__deps" / "core.ts").read_text()
        assert '  "core": require("core"),\n' in contents
        assert '"core/Checkbox": require("core/Checkbox")' in contents

    def test_no_playground_configured(self, sample_package):
        assert make_playground_deps(sample_package).items == []
        assert not (sample_package / "src" / "__deps").exists()
