"""
Search Tools
============

Tools for finding things across a project:
- search_in_files: literal substring search with line numbers
- analyze_directory: file counts, total size, extension breakdown and the
  list of recognized source files

Both walk the whole subtree below the given directory; a single file is
walked on its own. A search that finds nothing is a normal result, not an
error. The walks run in a worker thread so other reviews keep moving.
"""

import asyncio
import os
from collections import Counter

from aicr.tools import MCPTool, ToolRegistry, ToolResult
from aicr.tools.file_tools import walk_files
from aicr.tools._args import get_str
from aicr.utils.logger import Logger

logger = Logger("SearchTools")

# Extensions counted as reviewable source code
CODE_EXTENSIONS = frozenset({
    ".go", ".js", ".ts", ".jsx", ".tsx", ".py", ".java", ".c", ".cpp",
    ".h", ".rs", ".php", ".rb", ".swift", ".kt",
})

MAX_CODE_FILES_LISTED = 50


def is_code_file(path: str) -> bool:
    return os.path.splitext(path)[1] in CODE_EXTENSIONS


def search_text(directory: str, pattern: str, file_extension: str = "") -> ToolResult:
    """
    Report every file under ``directory`` that contains ``pattern``.

    Each matching file is listed with the number and text of every line
    containing the pattern. Files that cannot be read are skipped.

    Args:
        directory: Root of the search
        pattern: Literal text to find
        file_extension: Exact extension filter such as ".go", empty for all
    """
    if not pattern:
        return ToolResult.fail("pattern is required")

    parts = [f"Searching for '{pattern}' in {directory}:\n\n"]
    match_count = 0

    try:
        for path in walk_files(directory):
            if file_extension and os.path.splitext(path)[1] != file_extension:
                continue

            try:
                with open(path, encoding="utf-8", errors="replace") as f:
                    content = f.read()
            except OSError:
                continue

            if pattern not in content:
                continue

            match_count += 1
            parts.append(f"{path}\n")
            for number, line in enumerate(content.split("\n"), start=1):
                if pattern in line:
                    parts.append(f"  L{number}: {line.rstrip(chr(13))}\n")
            parts.append("\n")
    except (OSError, ValueError) as e:
        return ToolResult.fail(f"Search failed in {directory}: {e}")

    if match_count == 0:
        return ToolResult.ok(f"No matches found for '{pattern}' in {directory}")

    logger.debug(f"Found '{pattern}' in {match_count} file(s)")
    return ToolResult.ok("".join(parts))


def analyze_tree(directory: str) -> ToolResult:
    """Summarize a directory tree in a single walk."""
    file_count = 0
    total_size = 0
    by_extension: Counter[str] = Counter()
    code_files = []

    try:
        for path in walk_files(directory):
            try:
                size = os.lstat(path).st_size
            except OSError:
                continue

            file_count += 1
            total_size += size
            extension = os.path.splitext(path)[1]
            by_extension[extension] += 1
            if extension in CODE_EXTENSIONS:
                code_files.append(path)
    except (OSError, ValueError) as e:
        return ToolResult.fail(f"Failed to analyze directory {directory}: {e}")

    lines = [
        f"Directory analysis: {directory}",
        "",
        "Summary:",
        f"- Total files: {file_count}",
        f"- Total size: {total_size} bytes",
        "",
        "File types:",
    ]
    for extension, count in sorted(by_extension.items(), key=lambda item: (-item[1], item[0])):
        lines.append(f"- {extension or '(no extension)'}: {count}")

    lines.append("")
    lines.append(f"Code files ({len(code_files)}):")
    for path in code_files[:MAX_CODE_FILES_LISTED]:
        lines.append(f"- {path}")
    if len(code_files) > MAX_CODE_FILES_LISTED:
        lines.append(f"... (more than {MAX_CODE_FILES_LISTED} code files, list truncated)")

    return ToolResult.ok("\n".join(lines) + "\n")


# ==============================================================================
# Tool: Search In Files
# ==============================================================================

async def _search_in_files(params: dict) -> ToolResult:
    return await asyncio.to_thread(
        search_text,
        directory=get_str(params, "directory") or ".",
        pattern=get_str(params, "pattern"),
        file_extension=get_str(params, "file_extension"),
    )


search_in_files_tool = MCPTool(
    name="search_in_files",
    description=(
        "Search files for a literal keyword and show every matching line "
        "with its line number. Useful for TODO, FIXME or risky calls."
    ),
    parameters={
        "type": "object",
        "properties": {
            "directory": {
                "type": "string",
                "description": "Directory to search"
            },
            "pattern": {
                "type": "string",
                "description": "Text to search for"
            },
            "file_extension": {
                "type": "string",
                "description": "Only search files with this extension, such as .go"
            }
        },
        "required": ["directory", "pattern"]
    },
    execute=_search_in_files
)


# ==============================================================================
# Tool: Analyze Directory
# ==============================================================================

async def _analyze_directory(params: dict) -> ToolResult:
    return await asyncio.to_thread(analyze_tree, get_str(params, "directory") or ".")


analyze_directory_tool = MCPTool(
    name="analyze_directory",
    description="Analyze a directory: file counts, sizes, file types and the list of code files.",
    parameters={
        "type": "object",
        "properties": {
            "directory": {
                "type": "string",
                "description": "Directory to analyze"
            }
        },
        "required": ["directory"]
    },
    execute=_analyze_directory
)


def register_search_tools(registry: ToolRegistry) -> None:
    """Register the search tools with a registry."""
    registry.register(search_in_files_tool)
    registry.register(analyze_directory_tool)
