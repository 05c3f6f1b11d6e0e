"""
File Tools
==========

Tools that let the model look at the project under review:
- get_working_directory: where relative paths are resolved from
- read_file: read one file
- read_multiple_files: read up to 10 files in one call
- list_files: glob a directory, optionally walking the whole subtree

Path resolution:
    The reviewer is often started from a subdirectory of the project (for
    example from a tool folder inside the repository), while the model
    names files relative to the repository root. read_file therefore tries
    the path as given, then under "..", then under "../..".
"""

import asyncio
import glob
import os
from fnmatch import fnmatchcase

from aicr.tools import MCPTool, ToolRegistry, ToolResult
from aicr.tools._args import get_bool, get_list, get_str
from aicr.utils.logger import Logger

logger = Logger("FileTools")

MAX_FILE_CHARS = 10_000
MAX_FILES_PER_BATCH = 10


def candidate_paths(file_path: str) -> list[str]:
    """Paths tried by read_file, in order, without duplicates."""
    paths = []
    for prefix in ("", "..", os.path.join("..", "..")):
        path = os.path.join(prefix, file_path) if prefix else file_path
        if path not in paths:
            paths.append(path)
    return paths


def read_file_text(file_path: str) -> ToolResult:
    """
    Read a file, trying each candidate path in turn.

    The first readable candidate wins. Output starts with a header naming
    the requested path, and content beyond MAX_FILE_CHARS is cut with a
    marker. If no candidate is readable the failure lists every path that
    was tried and the last OS error.
    """
    if not file_path:
        return ToolResult.fail("file_path is required")

    attempted = candidate_paths(file_path)
    last_error: Exception | None = None

    for path in attempted:
        # open() raises ValueError for paths it refuses outright, such as embedded NUL bytes
        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                content = f.read(MAX_FILE_CHARS + 1)
        except (OSError, ValueError) as e:
            last_error = e
            continue

        if len(content) > MAX_FILE_CHARS:
            content = (
                content[:MAX_FILE_CHARS]
                + f"\n... (file truncated, showing first {MAX_FILE_CHARS} characters)"
            )
        logger.debug(f"Read {file_path} from {path}")
        return ToolResult.ok(f"=== {file_path} ===\n{content}")

    return ToolResult.fail(
        f"Failed to read file: {file_path}\n"
        f"Attempted paths: {', '.join(attempted)}\n"
        f"Absolute path: {os.path.abspath(file_path)}\n"
        f"Error: {last_error}"
    )


def read_files_text(file_paths: list) -> ToolResult:
    """
    Read several files, at most MAX_FILES_PER_BATCH of them.

    A file that cannot be read is reported inline and the batch carries
    on, so this never fails as a whole. Entries that are not strings are
    skipped.
    """
    if not file_paths:
        return ToolResult.ok("No file paths given. Pass file_paths as a list of paths.")

    parts = [f"Reading {len(file_paths)} file(s):\n\n"]

    for i, file_path in enumerate(file_paths):
        if i >= MAX_FILES_PER_BATCH:
            remaining = len(file_paths) - MAX_FILES_PER_BATCH
            parts.append(
                f"\n... (more than {MAX_FILES_PER_BATCH} files requested, "
                f"{remaining} not read)"
            )
            break

        if not isinstance(file_path, str):
            continue

        result = read_file_text(file_path)
        if not result.success:
            parts.append(f"\n[FAILED] {file_path}: {result.error}\n")
            continue

        parts.append(result.data)
        parts.append("\n\n")

    return ToolResult.ok("".join(parts))


def _raise_walk_error(error: OSError) -> None:
    raise error


def walk_files(directory: str):
    """
    Yield every file path below ``directory`` in a stable order.

    A regular file given as ``directory`` is walked as a single entry.

    Raises:
        OSError: If the directory (or a subdirectory) cannot be listed
    """
    if os.path.isfile(directory):
        yield directory
        return
    for root, dirs, files in os.walk(directory, onerror=_raise_walk_error):
        dirs.sort()
        for name in sorted(files):
            yield os.path.join(root, name)


def find_files(directory: str, pattern: str, recursive: bool) -> list[str]:
    """
    Collect matching file paths, directories excluded.

    Non-recursive mode globs ``directory/pattern``; recursive mode walks the
    subtree and matches ``pattern`` against each file's base name.

    Raises:
        OSError: If the directory walk fails
    """
    if recursive:
        return [path for path in walk_files(directory) if fnmatchcase(os.path.basename(path), pattern)]

    found = glob.glob(os.path.join(directory, pattern), include_hidden=True)
    return sorted(path for path in found if not os.path.isdir(path))


# ==============================================================================
# Tool: Get Working Directory
# ==============================================================================

async def _get_working_directory(params: dict) -> ToolResult:
    return ToolResult.ok(f"Current working directory: {os.getcwd()}")


get_working_directory_tool = MCPTool(
    name="get_working_directory",
    description="Get the current working directory, used to work out file paths.",
    parameters={
        "type": "object",
        "properties": {}
    },
    execute=_get_working_directory
)


# ==============================================================================
# Tool: Read File
# ==============================================================================

async def _read_file(params: dict) -> ToolResult:
    return await asyncio.to_thread(read_file_text, get_str(params, "file_path"))


read_file_tool = MCPTool(
    name="read_file",
    description=(
        "Read the contents of a file. Accepts relative or absolute paths. "
        f"Content longer than {MAX_FILE_CHARS} characters is truncated."
    ),
    parameters={
        "type": "object",
        "properties": {
            "file_path": {
                "type": "string",
                "description": "File path (relative or absolute)"
            }
        },
        "required": ["file_path"]
    },
    execute=_read_file
)


# ==============================================================================
# Tool: Read Multiple Files
# ==============================================================================

async def _read_multiple_files(params: dict) -> ToolResult:
    return await asyncio.to_thread(read_files_text, get_list(params, "file_paths"))


read_multiple_files_tool = MCPTool(
    name="read_multiple_files",
    description=f"Read several files at once (at most {MAX_FILES_PER_BATCH} per call).",
    parameters={
        "type": "object",
        "properties": {
            "file_paths": {
                "type": "array",
                "items": {"type": "string"},
                "description": "List of file paths"
            }
        },
        "required": ["file_paths"]
    },
    execute=_read_multiple_files
)


# ==============================================================================
# Tool: List Files
# ==============================================================================

def list_files_text(directory: str, pattern: str, recursive: bool) -> ToolResult:
    """List matching files with their sizes; no matches is a normal result."""
    try:
        matches = find_files(directory, pattern, recursive)
    except (OSError, ValueError) as e:
        return ToolResult.fail(f"Failed to list files in {directory}: {e}")

    lines = []
    for path in matches:
        try:
            size = os.stat(path).st_size
        except OSError:
            continue
        lines.append(f"- {path} ({size} bytes)")

    if not lines:
        return ToolResult.ok(f"No matching files found in {directory} (pattern: {pattern})")

    return ToolResult.ok(f"Found {len(lines)} file(s):\n" + "\n".join(lines) + "\n")


async def _list_files(params: dict) -> ToolResult:
    return await asyncio.to_thread(
        list_files_text,
        get_str(params, "directory") or ".",
        get_str(params, "pattern") or "*",
        get_bool(params, "recursive"),
    )


list_files_tool = MCPTool(
    name="list_files",
    description="List files in a directory, optionally recursing into subdirectories.",
    parameters={
        "type": "object",
        "properties": {
            "directory": {
                "type": "string",
                "description": "Directory path, defaults to the current directory"
            },
            "pattern": {
                "type": "string",
                "description": "File name pattern such as *.go, defaults to *"
            },
            "recursive": {
                "type": "boolean",
                "description": "Whether to search subdirectories"
            }
        }
    },
    execute=_list_files
)


def register_file_tools(registry: ToolRegistry) -> None:
    """Register the file tools with a registry."""
    registry.register(get_working_directory_tool)
    registry.register(read_file_tool)
    registry.register(read_multiple_files_tool)
    registry.register(list_files_tool)
