"""
Version Control and Lint Tools
==============================

Tools that shell out to external programs:
- get_git_diff: ``git diff <target>`` in the working directory
- run_linter: the linter matching a file's language

Linters are optional. When none is installed for a language the tool
returns an advisory with an install hint instead of an error, so the model
simply reviews without lint output. A linter that exits non-zero but prints
findings is reporting issues, which is a normal result.
"""

import asyncio
import os
import shutil
from dataclasses import dataclass

from aicr.tools import MCPTool, ToolRegistry, ToolResult
from aicr.tools._args import get_str
from aicr.utils.logger import Logger

logger = Logger("VcsTools")

MAX_DIFF_CHARS = 20_000


@dataclass
class CommandOutput:
    """Exit status and decoded output of a finished command."""
    returncode: int
    stdout: str
    stderr: str = ""


async def run_command(args: list[str], combine_output: bool = False) -> CommandOutput:
    """
    Run a command to completion and capture its output.

    Args:
        args: Program and arguments, no shell involved
        combine_output: Merge stderr into stdout (linters print to either)

    Raises:
        OSError: If the program cannot be started
    """
    process = await asyncio.create_subprocess_exec(
        *args,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT if combine_output else asyncio.subprocess.PIPE,
    )
    stdout, stderr = await process.communicate()
    return CommandOutput(
        returncode=process.returncode,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=(stderr or b"").decode("utf-8", errors="replace"),
    )


# ==============================================================================
# Tool: Get Git Diff
# ==============================================================================

async def git_diff(target: str = "HEAD") -> ToolResult:
    """
    Diff the working tree against ``target``.

    A clean tree is reported as "No changes", and diffs beyond
    MAX_DIFF_CHARS are truncated.
    """
    target = target or "HEAD"
    if target.startswith("-"):
        return ToolResult.fail(f"Invalid diff target: {target}")

    try:
        output = await run_command(["git", "diff", target])
    except OSError as e:
        return ToolResult.fail(f"Failed to run git diff: {e}")

    if output.returncode != 0:
        detail = output.stderr.strip() or f"exit status {output.returncode}"
        return ToolResult.fail(f"Failed to get git diff against {target}: {detail}")

    diff = output.stdout
    if not diff.strip():
        return ToolResult.ok(f"No changes against {target}")

    if len(diff) > MAX_DIFF_CHARS:
        diff = diff[:MAX_DIFF_CHARS] + f"\n... (diff truncated, showing first {MAX_DIFF_CHARS} characters)"

    return ToolResult.ok(diff)


async def _get_git_diff(params: dict) -> ToolResult:
    return await git_diff(get_str(params, "target") or "HEAD")


get_git_diff_tool = MCPTool(
    name="get_git_diff",
    description="Get the code changes in the Git repository compared with a target.",
    parameters={
        "type": "object",
        "properties": {
            "target": {
                "type": "string",
                "description": "What to compare against, such as HEAD, main or a commit hash; a file path diffs that file"
            }
        }
    },
    execute=_get_git_diff
)


# ==============================================================================
# Tool: Run Linter
# ==============================================================================

@dataclass(frozen=True)
class Linter:
    """An external lint program and how to invoke it on one file."""
    label: str
    command: tuple[str, ...]

    @property
    def executable(self) -> str:
        return self.command[0]


@dataclass(frozen=True)
class LinterFamily:
    """Linters for one language, in order of preference."""
    language: str
    linters: tuple[Linter, ...]
    install_hint: str


_GO = LinterFamily(
    language="Go",
    linters=(
        Linter("golangci-lint", ("golangci-lint", "run")),
        Linter("go vet", ("go", "vet")),
    ),
    install_hint="brew install golangci-lint",
)
_JAVASCRIPT = LinterFamily(
    language="JavaScript/TypeScript",
    linters=(Linter("eslint", ("eslint",)),),
    install_hint="npm install -g eslint",
)
_PYTHON = LinterFamily(
    language="Python",
    linters=(
        Linter("pylint", ("pylint",)),
        Linter("flake8", ("flake8",)),
    ),
    install_hint="pip install pylint",
)

LINTERS_BY_EXTENSION: dict[str, LinterFamily] = {
    ".go": _GO,
    ".js": _JAVASCRIPT,
    ".ts": _JAVASCRIPT,
    ".jsx": _JAVASCRIPT,
    ".tsx": _JAVASCRIPT,
    ".py": _PYTHON,
}


def select_linter(family: LinterFamily) -> Linter | None:
    """First linter of the family whose executable is on PATH."""
    for linter in family.linters:
        if shutil.which(linter.executable):
            return linter
    return None


async def lint_file(file_path: str) -> ToolResult:
    """Run the preferred installed linter for ``file_path``."""
    if not file_path:
        return ToolResult.fail("file_path is required")

    extension = os.path.splitext(file_path)[1]
    family = LINTERS_BY_EXTENSION.get(extension)
    if family is None:
        return ToolResult.ok(
            f"Warning: unsupported file type: {extension or '(no extension)'}\n"
            f"Supported types: {', '.join(LINTERS_BY_EXTENSION)}"
        )

    linter = select_linter(family)
    if linter is None:
        tried = ", ".join(candidate.label for candidate in family.linters)
        return ToolResult.ok(
            f"Warning: no {family.language} linter is installed (tried {tried})\n"
            f"Suggested install: {family.install_hint}"
        )

    logger.info(f"Running {linter.label} on {file_path}")
    try:
        output = await run_command([*linter.command, file_path], combine_output=True)
    except OSError as e:
        return ToolResult.fail(f"Failed to run {linter.label}: {e}")

    findings = output.stdout
    if output.returncode != 0 and not findings.strip():
        return ToolResult.fail(f"Failed to run {linter.label}: exit status {output.returncode}")

    if not findings.strip():
        return ToolResult.ok(f"{linter.label} passed: no issues found")

    return ToolResult.ok(f"Results from {linter.label}:\n{findings}")


async def _run_linter(params: dict) -> ToolResult:
    return await lint_file(get_str(params, "file_path"))


run_linter_tool = MCPTool(
    name="run_linter",
    description="Run a static analysis tool on a file (golangci-lint, go vet, eslint, pylint or flake8).",
    parameters={
        "type": "object",
        "properties": {
            "file_path": {
                "type": "string",
                "description": "Path of the file to check"
            }
        }
    },
    execute=_run_linter
)


def register_vcs_tools(registry: ToolRegistry) -> None:
    """Register the git and lint tools with a registry."""
    registry.register(get_git_diff_tool)
    registry.register(run_linter_tool)
