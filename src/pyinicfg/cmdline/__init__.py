"""Command-line parsers for option sets and section registries."""
from __future__ import annotations

from .multiparser import MultiParser
from .parser import Parser, looks_like_option, split_compound

__all__ = ["MultiParser", "Parser", "looks_like_option", "split_compound"]
