"""Installer for the oh-my-opencode CLI and its OpenCode companion."""

__version__ = "0.1.0"
