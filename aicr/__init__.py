"""
AI Code Review
==============

Reviews code with a chat-completions model that can ask for context while
it works: file contents, directory listings, search results, git diffs and
linter output.

This package provides:
- agent: the tool-calling review loop and the model client
- tools: the fixed set of review tools
- utils: configuration and logging
"""

__version__ = "1.0.0"
