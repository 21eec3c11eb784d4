"""Warren error hierarchy.

All warren-specific errors inherit from WarrenError for easy catching.
"""


class WarrenError(Exception):
    """Base error for all warren operations."""


class ConfigError(WarrenError):
    """Invalid or missing configuration (e.g. a relative routes root)."""


class StructuralConflictError(WarrenError):
    """Two route files in one directory claim the same route.

    Attributes:
        directory: The directory holding the conflicting files.
        names: The conflicting entry names, sorted.

    """

    def __init__(self, directory: object, names: tuple[str, ...], detail: str = "") -> None:
        self.directory = directory
        self.names = names
        msg = f"Conflicting route files in {directory}: {', '.join(names)}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class ModuleLoadError(WarrenError):
    """A route module exists but raised while it was being loaded."""


class DiscoveryError(WarrenError):
    """The routes directory could not be read (missing, not a directory, denied)."""
