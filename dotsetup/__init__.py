"""Set up a machine from YAML task files kept in a dotfiles repository."""

__version__ = "0.1.0"
__all__ = ["__version__"]