"""pi-ternimal: keep asynchronous output above an interactive prompt line."""

# Console and logger
from pi.ternimal.console import Console, create_logger

# Logging setup
from pi.ternimal.log import setup_logging

# Output multiplexing
from pi.ternimal.output import Output, OutputStream, WriteRecord

# Prompt state and relocation
from pi.ternimal.prompt import PromptState
from pi.ternimal.relocation import Chunks, get_chunks

# Settings
from pi.ternimal.settings import TernimalSettings, load_settings

# Raw channel adapters
from pi.ternimal.stdio import ResizeEvent, StdioInput, StdioOutput

# Terminal
from pi.ternimal.terminal import RawStreams, Terminal, create

# Types
from pi.ternimal.types import (
    Context,
    InitFunction,
    InitOptions,
    LineEditor,
    PauseOptions,
    PauseStreamOptions,
    RawInput,
    RawOutput,
    ResumeOptions,
    SetupFunction,
    Status,
)

# Width
from pi.ternimal.width import count_rows, visible_width

__all__ = [
    # Console
    "Console",
    "create_logger",
    "setup_logging",
    # Output
    "Output",
    "OutputStream",
    "WriteRecord",
    # Prompt
    "Chunks",
    "PromptState",
    "get_chunks",
    # Settings
    "TernimalSettings",
    "load_settings",
    # Stdio
    "ResizeEvent",
    "StdioInput",
    "StdioOutput",
    # Terminal
    "RawStreams",
    "Terminal",
    "create",
    # Types
    "Context",
    "InitFunction",
    "InitOptions",
    "LineEditor",
    "PauseOptions",
    "PauseStreamOptions",
    "RawInput",
    "RawOutput",
    "ResumeOptions",
    "SetupFunction",
    "Status",
    # Width
    "count_rows",
    "visible_width",
]
