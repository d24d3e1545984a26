"""
traitforge/errors.py
Error kinds raised by the trait engine

Nothing in the engine substitutes a default value for bad input. Every
failure below aborts the operation that raised it.
"""


class TraitForgeError(Exception):
    """Base class for all trait engine errors."""
    pass


class InvalidSeedError(TraitForgeError, ValueError):
    """Raised when a seed fails its format precondition."""
    pass


class ConfigurationError(TraitForgeError, ValueError):
    """Raised when static configuration tables are malformed or inconsistent."""
    pass


class InvalidColorError(TraitForgeError, ValueError):
    """Raised when a palette entry is not a valid hex color."""
    pass
