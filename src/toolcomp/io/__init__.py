"""Path I/O and emission sinks for toolcomp.

This module handles reading paths from files and delivering the compensated
toolpath to a consumer. It keeps file formats and output syntax out of the
geometry pipeline.

Key responsibilities:
- Load paths from JSON or text files
- Forward command streams to sinks in order
- Render G-code and JSON output

Key classes:
- PathReader: Load paths from files
- EmissionSink: Protocol every sink implements
- RecordingSink: Sink that records calls
- GcodeWriter: Sink that renders G-code
"""

from toolcomp.io.reader import PathReader, parse_unit
from toolcomp.io.sink import EmissionSink, RecordingSink, forward
from toolcomp.io.writer import GcodeWriter, commands_to_json, write_text

__all__ = [
    "EmissionSink",
    "GcodeWriter",
    "PathReader",
    "RecordingSink",
    "commands_to_json",
    "forward",
    "parse_unit",
    "write_text",
]
