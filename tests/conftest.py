"""
Shared test fixtures and configuration for propkit tests.

This module provides common fixtures used across all test types:
- A sample component package (manifest, tsconfig, sources, READMEs)
- Helpers for writing TypeScript sources into a temporary tree
- A type-query project over the sample package
"""

import json
from pathlib import Path
from textwrap import dedent

import pytest

from propkit.typequery import Project

# ============================================================================
# SAMPLE PACKAGE CONTENTS
# ============================================================================

SAMPLE_MANIFEST = {
    "name": "reakit",
    "version": "1.0.0",
    "main": "lib/index.js",
    "module": "es/index.js",
    "unpkg": "dist/reakit.min.js",
    "types": "ts/index.d.ts",
}

SAMPLE_TSCONFIG = {
    "extends": "../../tsconfig.json",
    "include": ["src"],
}

CHECKBOX_STATE_TS = '''
import * as React from "react";

export type CheckboxState = {
  /**
   * Stores the state of the checkbox.
   */
  state: boolean | "indeterminate";
};

export type CheckboxActions = {
  /**
   * Sets `state`.
   */
  setState: (state: boolean) => void;
};

export type CheckboxInitialState = Partial<CheckboxState>;

export type CheckboxStateReturn = CheckboxState & CheckboxActions;

export function useCheckboxState(initialState: CheckboxInitialState = {}): CheckboxStateReturn {
  const [state, setState] = React.useState(initialState.state || false);
  return { state, setState };
}
'''

CHECKBOX_TSX = '''
import * as React from "react";
import { CheckboxStateReturn } from "./CheckboxState";

export type CheckboxOptions = Pick<CheckboxStateReturn, "state" | "setState"> & {
  /**
   * Checkbox's value is going to be used when multiple checkboxes share the
   * same state.
   *
   * Checking a checkbox with value will add it to the state array.
   */
  value?: string | number;
  /**
   * Checkbox's `checked` state.
   */
  checked?: boolean;
  /**
   * @private
   */
  unstable_clickOnEnter?: boolean;
};

export type CheckboxHTMLProps = React.InputHTMLAttributes<any>;

export type CheckboxProps = CheckboxOptions & CheckboxHTMLProps;

export const Checkbox = createComponent({
  as: "input",
  useHook: useCheckbox,
});
'''

CHECKBOX_README = """# Checkbox

Accessible `Checkbox` component.

## Usage

```md
## Props

Headings inside code blocks are left alone.
```

## Props

Outdated content.

## Related

- Radio
"""

SEPARATOR_TSX = '''
export type SeparatorOptions = {
  /**
   * Separator's orientation.
   */
  orientation?: "horizontal" | "vertical";
};

export const Separator = createComponent({ as: "hr" });
'''

SEPARATOR_README = """# Separator

No props heading here.
"""

UTILS_TS = """
export function noop() {}
"""

INDEX_TS = """
export * from "./Checkbox";
export * from "./Separator";
"""

CHECKBOX_INDEX_TS = """
export * from "./Checkbox";
export * from "./CheckboxState";
"""


# ============================================================================
# HELPERS
# ============================================================================


def write_files(root: Path, files: dict[str, str]) -> Path:
    """Write ``{relative_path: contents}`` under ``root``."""
    for relative, contents in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(contents).lstrip("\n"), encoding="utf-8")
    return root


def write_json(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


# ============================================================================
# PACKAGE FIXTURES
# ============================================================================


@pytest.fixture
def sample_package(tmp_path):
    """A component package with a state module, a component and utilities.

    Layout:
        package.json, tsconfig.json
        src/index.ts
        src/Checkbox/{index.ts, Checkbox.tsx, CheckboxState.ts, README.md}
        src/Separator/{Separator.tsx, README.md}
        src/__utils/noop.ts (private)
    """
    root = tmp_path / "reakit"
    root.mkdir()
    write_json(root / "package.json", SAMPLE_MANIFEST)
    write_json(root / "tsconfig.json", SAMPLE_TSCONFIG)
    write_files(
        root,
        {
            "src/index.ts": INDEX_TS,
            "src/Checkbox/index.ts": CHECKBOX_INDEX_TS,
            "src/Checkbox/Checkbox.tsx": CHECKBOX_TSX,
            "src/Checkbox/CheckboxState.ts": CHECKBOX_STATE_TS,
            "src/Checkbox/README.md": CHECKBOX_README,
            "src/Separator/Separator.tsx": SEPARATOR_TSX,
            "src/Separator/README.md": SEPARATOR_README,
            "src/__utils/noop.ts": UTILS_TS,
        },
    )
    return root


@pytest.fixture
def ts_dir(tmp_path):
    """Directory for ad-hoc TypeScript sources."""
    directory = tmp_path / "ts"
    directory.mkdir()
    return directory


@pytest.fixture
def project():
    """A type-query project without a tsconfig."""
    return Project()


@pytest.fixture
def load_source(ts_dir, project):
    """Write a source file and parse it into the project.

    Usage:
        parsed = load_source("Button.ts", "export type ButtonOptions = {...}")
    """

    def _load(filename: str, contents: str):
        write_files(ts_dir, {filename: contents})
        return project.add_source_file_at_path(ts_dir / filename)

    return _load
