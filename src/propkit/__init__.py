"""propkit - build tooling for TypeScript component-library packages

Philosophy:
- Ruthless simplicity
- Brick architecture (self-contained modules)
- Deterministic output (generated files are committed)
- Fail fast on I/O, best effort on README injection

propkit derives entry-point proxy folders and .gitignore contents from a
package manifest, injects prop tables extracted from TypeScript declarations
into README files, and emits deduplicated key-list modules.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
