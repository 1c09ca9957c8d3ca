"""File-level entry points for reading and writing modulemd data."""

from .files import read_index, read_stream, read_stream_string, write_index

__all__ = ["read_index", "read_stream", "read_stream_string", "write_index"]
