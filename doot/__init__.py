"""Dotfiles manager core: scan, map, link, add and restore dotfiles."""

__version__ = "0.1.0"