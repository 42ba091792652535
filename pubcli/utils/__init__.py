"""Utility functions for pubcli."""

from pubcli.utils.env import load_env_file_if_present

__all__ = ["load_env_file_if_present"]
