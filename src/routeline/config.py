"""Dispatcher configuration.

Built once at startup and shared by the App, its Dispatcher and its
Container. Nothing reads configuration from the environment.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DispatchConfig:
    """Dispatcher configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = DispatchConfig(interface_prefixes=("I",), debug=True)
    """

    # Routing
    default_methods: tuple[str, ...] = ("GET",)

    # Dependency resolution
    interface_prefixes: tuple[str, ...] = ("I", "Abstract")  # IUserRepo -> UserRepo
    import_types: bool = True  # Allow "pkg.mod.Class" identifiers to be imported on demand

    # Error output
    debug: bool = False  # Include resolution error details in 500 bodies

    # Logging (applied by the CLI; the library never installs handlers)
    log_level: str = "warning"
