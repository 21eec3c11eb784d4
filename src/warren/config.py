"""Warren configuration.

RoutingConfig is the immutable input to one discovery run.
"""

from dataclasses import dataclass
from pathlib import Path

from warren._errors import ConfigError
from warren._types import MissingExportPolicy
from warren.routes.conventions import DEFAULT_CONVENTIONS, Convention, validate_conventions


@dataclass(frozen=True, slots=True)
class RoutingConfig:
    """Configuration for a discovery run.

    Attributes:
        root: Absolute path of the routes directory.  A relative path raises
              ``ConfigError`` on construction, before any filesystem access.
        conventions: Active naming rules (default: method files plus
              page/route files).
        missing_export: ``ignore`` silently skips files that match a
              convention but export no usable handler; ``warn`` also logs a
              warning and records a ``ModuleSkipped`` event.
        module_prefix: Namespace under which route modules are registered
              in ``sys.modules``.

    """

    root: Path
    conventions: tuple[Convention, ...] = DEFAULT_CONVENTIONS
    missing_export: MissingExportPolicy = "ignore"
    module_prefix: str = "warren_routes"

    def __post_init__(self) -> None:
        root = Path(self.root)
        if not root.is_absolute():
            msg = f"Path {root} is not absolute"
            raise ConfigError(msg)
        object.__setattr__(self, "root", root)

        object.__setattr__(self, "conventions", tuple(self.conventions))
        validate_conventions(self.conventions)

        if self.missing_export not in ("ignore", "warn"):
            msg = f"missing_export must be 'ignore' or 'warn', got {self.missing_export!r}"
            raise ConfigError(msg)
        if not self.module_prefix.isidentifier():
            msg = f"module_prefix must be a Python identifier, got {self.module_prefix!r}"
            raise ConfigError(msg)
