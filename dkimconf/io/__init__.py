"""Input helpers for dkimconf.

This package adapts caller-provided streams and opens configuration files
by path for the loaders and CLI.
"""

from .streams import ReadableStream, as_text_reader, iter_text_lines, open_config_file

__all__ = ["ReadableStream", "as_text_reader", "iter_text_lines", "open_config_file"]
