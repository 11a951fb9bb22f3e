"""Function Forge -- scaffolds function projects inside a repository."""

__version__ = "0.1.0"
