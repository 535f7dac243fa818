"""Custom exceptions for propkit."""


class PropkitError(Exception):
    """Base exception for propkit errors."""

    pass


class ManifestError(PropkitError):
    """Package manifest is missing or malformed."""

    pass


class ConfigError(PropkitError):
    """Configuration file could not be read or written."""

    pass


class TypeQueryError(PropkitError):
    """TypeScript project could not be loaded."""

    pass


class InjectionError(PropkitError):
    """Generated Markdown could not be injected into a document."""

    pass
