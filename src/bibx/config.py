"""ContextVar-based parse configuration for bibx.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is set once per BibTeX instance (or per parse() call) and read by
every Scanner created in that context.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # Through the high-level API
    bib = BibTeX(strict_field_values=False)
    decls = bib.parse("@book{b1, month = jan}")

    # Direct scanner/parser usage (advanced)
    from bibx.config import parse_config_context, ParseConfig

    with parse_config_context(ParseConfig(strict_type_names=True)):
        parser = Parser(Scanner(RuneReader(source)))
        decls = list(parser)

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Read once when a Scanner is created. Frozen dataclass ensures
    thread-safety (immutable after creation).

    Note: source_file is intentionally excluded; it's per-call state,
    not configuration. It remains on the RuneReader instance.

    Attributes:
        strict_type_names: Declaration type names must be letters only
            (``@book``) instead of any NAME (``@my-type``).
        strict_field_values: Field text must be a digit run or be enclosed
            in quotes or braces. When False, bare abbreviation references
            (``month = jan``) are accepted as long as they are balanced.

    """

    strict_type_names: bool = False
    strict_field_values: bool = True

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ParseConfig":
        """Create ParseConfig from dictionary.

        Only includes keys that are valid ParseConfig fields; unknown keys
        are silently ignored.

        Args:
            config_dict: Dictionary with config values. Keys should match
                ParseConfig attribute names.

        Returns:
            New ParseConfig instance with values from dict.

        Example:
            >>> config = ParseConfig.from_dict({
            ...     "strict_field_values": False,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.strict_field_values
            False

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ParseConfig = ParseConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "bibx_parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get current parse configuration (thread-local).

    Returns:
        The active ParseConfig for this thread/context.

    """
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set parse configuration for current context.

    Args:
        config: ParseConfig instance to use for this context.

    """
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.

    """
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: ParseConfig to use within the context.

    Yields:
        None

    Example:
        >>> with parse_config_context(ParseConfig(strict_type_names=True)):
        ...     scanner = Scanner(RuneReader("@my-type{k}"))
        >>> # Automatically reset to previous config

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


__all__ = [
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
]
