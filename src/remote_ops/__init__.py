"""UI-agnostic engine for remote text-object operations."""

__all__ = [
    "adapters",
    "actions",
    "buffer",
    "config",
    "host",
    "keymaps",
    "modes",
    "operations",
    "runtime",
    "textobjects",
]

__version__ = "0.1.0"
