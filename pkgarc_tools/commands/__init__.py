"""CLI command implementations for pkgarc_tools.

This module contains all command-line interface implementations:
- list: List package entries
- show: Write entry content to standard output
- info: Show header and catalog information
- pack: Pack files and directories into a package
- spill: Extract all entries into a directory
"""

from pkgarc_tools.commands.inspect import info, list_entries, show
from pkgarc_tools.commands.pack import pack, spill

__all__ = ["info", "list_entries", "pack", "show", "spill"]
