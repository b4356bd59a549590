"""Human-readable action descriptions for tool calls.

Turns (tool name, status, arguments) into a phrase such as
"Reading config.ts" or "Searching for "TODO"". Resolution order:

1. exact match in the action table (case-insensitive)
2. ``browser_`` / ``lsp_`` / ``mcp_`` prefix patterns
3. a generic phrase built from the tool name

so every tool name yields a non-empty description. Context (the file,
command, pattern...) is appended when the tool's extractor finds it in
the structured arguments or, while arguments are still streaming, in
the partial JSON text.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urlparse

from toolview.shared.formatters.partial_json import extract_string_field
from toolview.shared.models.tool_record import ToolStatus

ContextExtractor = Callable[[dict, str | None], str | None]

_STATUSES = ("queued", "running", "completed", "error", "pending")


@dataclass(frozen=True)
class ToolAction:
    """Per-status verb phrases for one tool."""
    verbs: dict[str, str]
    category: str
    context: ContextExtractor | None = None


# ── Context extractors ──


def _last_segment(path: str) -> str:
    parts = path.replace("\\", "/").split("/")
    return parts[-1] or path


def extract_file_path(args: dict, partial_json: str | None = None) -> str | None:
    """Last path segment of the file the tool operates on."""
    path = extract_string_field(args, partial_json, ("path", "file_path", "filePath", "file"))
    if path:
        return _last_segment(path)
    return None


def extract_command(args: dict, partial_json: str | None = None) -> str | None:
    """Shell command, shortened for one-line display."""
    command = extract_string_field(args, partial_json, ("command",))
    if not command:
        return None
    if len(command) > 40:
        # Very long commands: the program name says the most
        return command.split()[0] if command.split() else command[:25]
    if len(command) > 25:
        return f"{command[:25]}..."
    return command


def extract_pattern(args: dict, partial_json: str | None = None) -> str | None:
    """Quoted search pattern or query."""
    pattern = extract_string_field(args, partial_json, ("pattern", "query", "search"))
    if not pattern:
        return None
    if len(pattern) > 25:
        return f'"{pattern[:22]}..."'
    return f'"{pattern}"'


def extract_url(args: dict, partial_json: str | None = None) -> str | None:
    """Hostname of the URL, or the raw (truncated) string if it won't parse."""
    url = extract_string_field(args, partial_json, ("url",))
    if not url:
        return None
    try:
        parsed = urlparse(url)
        hostname = parsed.hostname if parsed.scheme else None
    except ValueError:
        hostname = None
    if hostname:
        return hostname
    return f"{url[:27]}..." if len(url) > 30 else url


def extract_directory(args: dict, partial_json: str | None = None) -> str:
    """Last segment of the directory being listed; "." when unknown."""
    directory = extract_string_field(args, partial_json, ("dir", "directory", "path"))
    if directory:
        return _last_segment(directory) or "."
    return "."


def _extract_git_subcommand(args: dict, partial_json: str | None = None) -> str | None:
    return extract_string_field(args, partial_json, ("subcommand",))


def _extract_research_topic(args: dict, partial_json: str | None = None) -> str | None:
    return extract_pattern(args, partial_json) or extract_string_field(
        args, partial_json, ("topic",)
    )


# ── Action table ──

_ACTIONS: dict[str, ToolAction] = {}


def _register(
    names: tuple[str, ...],
    verbs: tuple[str, str, str, str, str],
    category: str,
    context: ContextExtractor | None = None,
) -> None:
    """Register verbs (queued, running, completed, error, pending) for *names*."""
    action = ToolAction(verbs=dict(zip(_STATUSES, verbs)), category=category, context=context)
    for name in names:
        _ACTIONS[name] = action


# File reads
_register(("read", "read_file"),
          ("Waiting to read", "Reading", "Read", "Failed to read", "Will read"),
          "file", extract_file_path)
_register(("cat",),
          ("Waiting to display", "Displaying", "Displayed", "Failed to display", "Will display"),
          "file", extract_file_path)

# File writes
_register(("write",),
          ("Waiting to write", "Writing", "Wrote", "Failed to write", "Will write"),
          "file", extract_file_path)
_register(("write_file", "create_file"),
          ("Waiting to create", "Creating", "Created", "Failed to create", "Will create"),
          "file", extract_file_path)

# File edits
_register(("edit", "edit_file"),
          ("Waiting to edit", "Editing", "Edited", "Failed to edit", "Will edit"),
          "edit", extract_file_path)
_register(("replace",),
          ("Waiting to replace", "Replacing content in", "Replaced content in",
           "Failed to replace content in", "Will replace content in"),
          "edit", extract_file_path)
_register(("patch",),
          ("Waiting to patch", "Patching", "Patched", "Failed to patch", "Will patch"),
          "edit", extract_file_path)

# File deletes
_register(("delete", "delete_file"),
          ("Waiting to delete", "Deleting", "Deleted", "Failed to delete", "Will delete"),
          "file", extract_file_path)
_register(("remove", "rm"),
          ("Waiting to remove", "Removing", "Removed", "Failed to remove", "Will remove"),
          "file", extract_file_path)

# Directories
_register(("ls", "list_directory", "list_dir"),
          ("Waiting to list", "Listing contents of", "Listed", "Failed to list", "Will list"),
          "file", extract_directory)
_register(("tree",),
          ("Waiting to map", "Mapping directory tree", "Mapped directory tree",
           "Failed to map directory", "Will map directory tree"),
          "file", extract_directory)

# Terminal
_register(("run",),
          ("Waiting to execute", "Executing", "Executed", "Command failed", "Will execute"),
          "terminal", extract_command)
_register(("run_terminal",),
          ("Waiting to run", "Running in terminal", "Ran", "Terminal command failed",
           "Will run in terminal"),
          "terminal", extract_command)
_register(("exec",),
          ("Waiting to execute", "Executing", "Executed", "Execution failed", "Will execute"),
          "terminal", extract_command)
_register(("shell",),
          ("Waiting to run shell", "Running shell command", "Ran shell command",
           "Shell command failed", "Will run shell"),
          "terminal", extract_command)
_register(("bash",),
          ("Waiting to run", "Running bash command", "Ran bash", "Bash command failed",
           "Will run bash"),
          "terminal", extract_command)

# Search
_register(("grep",),
          ("Waiting to search for", "Searching for", "Searched for", "Search failed for",
           "Will search for"),
          "search", extract_pattern)
_register(("search",),
          ("Waiting to search", "Searching", "Searched", "Search failed", "Will search"),
          "search", extract_pattern)
_register(("find",),
          ("Waiting to find", "Finding", "Found", "Failed to find", "Will find"),
          "search", extract_pattern)
_register(("code_search",),
          ("Waiting to search code for", "Searching code for", "Searched code for",
           "Code search failed for", "Will search code for"),
          "search", extract_pattern)

# Web
_register(("fetch", "url"),
          ("Waiting to fetch", "Fetching", "Fetched", "Failed to fetch", "Will fetch"),
          "web", extract_url)
_register(("web_fetch",),
          ("Waiting to fetch from", "Fetching from", "Fetched from", "Failed to fetch from",
           "Will fetch from"),
          "web", extract_url)
_register(("browse",),
          ("Waiting to browse", "Browsing", "Browsed", "Failed to browse", "Will browse"),
          "web", extract_url)
_register(("download",),
          ("Waiting to download", "Downloading", "Downloaded", "Failed to download",
           "Will download"),
          "web", extract_url)

# Browser automation
_register(("browser_navigate",),
          ("Waiting to navigate to", "Navigating to", "Navigated to", "Failed to navigate to",
           "Will navigate to"),
          "browser", extract_url)
_register(("browser_click",),
          ("Waiting to click", "Clicking element", "Clicked", "Failed to click", "Will click"),
          "browser")
_register(("browser_type",),
          ("Waiting to type", "Typing text", "Typed", "Failed to type", "Will type"),
          "browser")
_register(("browser_screenshot",),
          ("Waiting to capture", "Capturing screenshot", "Captured screenshot",
           "Failed to capture", "Will capture screenshot"),
          "browser")
_register(("browser_scroll",),
          ("Waiting to scroll", "Scrolling page", "Scrolled", "Failed to scroll", "Will scroll"),
          "browser")
_register(("browser_wait",),
          ("Waiting to wait for", "Waiting for element", "Wait completed", "Wait timeout",
           "Will wait for"),
          "browser")
_register(("browser_get",),
          ("Waiting to get page", "Getting page content", "Got page content",
           "Failed to get content", "Will get page"),
          "browser")
_register(("browser_evaluate",),
          ("Waiting to evaluate", "Evaluating JavaScript", "Evaluated script",
           "Evaluation failed", "Will evaluate"),
          "browser")
_register(("browser_network",),
          ("Waiting to monitor", "Monitoring network", "Monitored network",
           "Monitoring failed", "Will monitor network"),
          "browser")
_register(("browser_tabs",),
          ("Waiting to manage tabs", "Managing browser tabs", "Managed tabs",
           "Tab management failed", "Will manage tabs"),
          "browser")
_register(("browser_security_status",),
          ("Waiting to check", "Checking security status", "Checked security",
           "Security check failed", "Will check security"),
          "browser")

# Research / analysis
_register(("research",),
          ("Waiting to research", "Researching", "Researched", "Research failed",
           "Will research"),
          "analysis", _extract_research_topic)
_register(("analyze",),
          ("Waiting to analyze", "Analyzing", "Analyzed", "Analysis failed", "Will analyze"),
          "analysis")
_register(("think",),
          ("Preparing to think", "Thinking through", "Thought through",
           "Thinking interrupted", "Will think through"),
          "analysis")

# Git
_register(("git",),
          ("Waiting to run git", "Running git operation", "Ran git", "Git operation failed",
           "Will run git"),
          "git", _extract_git_subcommand)
_register(("commit",),
          ("Waiting to commit", "Committing changes", "Committed", "Commit failed",
           "Will commit"),
          "git")
_register(("pr",),
          ("Waiting to process PR", "Processing pull request", "Processed PR",
           "PR action failed", "Will process PR"),
          "git")

# Language server
_register(("lsp_hover",),
          ("Waiting to get hover info", "Getting hover information", "Got hover info",
           "Failed to get hover info", "Will get hover info"),
          "lsp")
_register(("lsp_definition",),
          ("Waiting to find definition", "Finding definition", "Found definition",
           "Failed to find definition", "Will find definition"),
          "lsp")
_register(("lsp_references",),
          ("Waiting to find references", "Finding all references", "Found references",
           "Failed to find references", "Will find references"),
          "lsp")
_register(("lsp_symbols",),
          ("Waiting to list symbols", "Listing symbols", "Listed symbols",
           "Failed to list symbols", "Will list symbols"),
          "lsp")
_register(("lsp_diagnostics",),
          ("Waiting to check diagnostics", "Checking diagnostics", "Checked diagnostics",
           "Failed to check diagnostics", "Will check diagnostics"),
          "lsp")
_register(("lsp_completions",),
          ("Waiting to get completions", "Getting completions", "Got completions",
           "Failed to get completions", "Will get completions"),
          "lsp")
_register(("lsp_code_actions",),
          ("Waiting to get code actions", "Getting code actions", "Got code actions",
           "Failed to get code actions", "Will get code actions"),
          "lsp")
_register(("lsp_rename",),
          ("Waiting to rename", "Renaming symbol", "Renamed symbol", "Rename failed",
           "Will rename"),
          "lsp")

# Planning
_register(("todo_write",),
          ("Waiting to update todos", "Updating todo list", "Updated todos",
           "Failed to update todos", "Will update todos"),
          "system")
_register(("create_plan",),
          ("Waiting to create plan", "Creating task plan", "Created plan",
           "Failed to create plan", "Will create plan"),
          "system")
_register(("verify_tasks",),
          ("Waiting to verify", "Verifying tasks", "Verified tasks", "Verification failed",
           "Will verify tasks"),
          "system")
_register(("get_active_plan",),
          ("Waiting to get plan", "Getting active plan", "Got active plan",
           "Failed to get plan", "Will get plan"),
          "system")
_register(("list_plans",),
          ("Waiting to list plans", "Listing plans", "Listed plans", "Failed to list plans",
           "Will list plans"),
          "system")
_register(("delete_plan",),
          ("Waiting to delete plan", "Deleting plan", "Deleted plan",
           "Failed to delete plan", "Will delete plan"),
          "system")
_register(("todo",),
          ("Waiting to manage todos", "Managing todos", "Managed todos",
           "Failed to manage todos", "Will manage todos"),
          "system")

# System
_register(("create_tool",),
          ("Waiting to create tool", "Creating dynamic tool", "Created tool",
           "Failed to create tool", "Will create tool"),
          "system")
_register(("request_tools",),
          ("Waiting to request tools", "Requesting tools", "Requested tools",
           "Failed to request tools", "Will request tools"),
          "system")
_register(("config",),
          ("Waiting to update config", "Updating configuration", "Updated config",
           "Failed to update config", "Will update config"),
          "system")
_register(("settings",),
          ("Waiting to modify settings", "Modifying settings", "Modified settings",
           "Failed to modify settings", "Will modify settings"),
          "system")
_register(("message",),
          ("Waiting to send message", "Sending message", "Sent message",
           "Failed to send message", "Will send message"),
          "system")
_register(("image",),
          ("Waiting to process image", "Processing image", "Processed image",
           "Image processing failed", "Will process image"),
          "system")
_register(("bulk_operations",),
          ("Waiting to perform bulk ops", "Performing bulk file operations",
           "Completed bulk ops", "Bulk operations failed", "Will perform bulk ops"),
          "system")
_register(("read_lints",),
          ("Waiting to check lints", "Checking lint errors", "Checked lints",
           "Failed to check lints", "Will check lints"),
          "system")


# ── Resolution ──

# prefix -> (category, queued, running verb, completed verb, error, pending)
_PREFIX_PATTERNS: tuple[tuple[str, str, str, str, str, str, str], ...] = (
    ("browser_", "browser", "Waiting to perform browser action", "Performing", "Completed",
     "Browser action failed", "Will perform browser action"),
    ("lsp_", "lsp", "Waiting for LSP", "Running", "Completed",
     "LSP operation failed", "Will run LSP operation"),
    ("mcp_", "system", "Waiting for MCP tool", "Running", "Completed",
     "MCP tool failed", "Will run MCP tool"),
)


def get_tool_action(tool_name: str) -> ToolAction:
    """Resolve the action config for *tool_name*, never failing."""
    name = (tool_name or "").lower()

    action = _ACTIONS.get(name)
    if action is not None:
        return action

    for prefix, category, queued, running, completed, error, pending in _PREFIX_PATTERNS:
        if name.startswith(prefix):
            suffix = name[len(prefix):].replace("_", " ")
            return ToolAction(
                verbs={
                    "queued": queued,
                    "running": f"{running} {suffix}",
                    "completed": f"{completed} {suffix}",
                    "error": error,
                    "pending": pending,
                },
                category=category,
            )

    formatted = name.replace("_", " ") or "tool"
    return ToolAction(
        verbs={
            "queued": f"Waiting to run {formatted}",
            "running": f"Running {formatted}",
            "completed": f"Completed {formatted}",
            "error": f"Failed {formatted}",
            "pending": f"Will run {formatted}",
        },
        category="system",
    )


def _status_key(status: ToolStatus | str) -> str:
    value = status.value if isinstance(status, ToolStatus) else str(status)
    return value if value in _STATUSES else "running"


def describe(
    tool_name: str,
    status: ToolStatus | str = ToolStatus.RUNNING,
    arguments: dict[str, Any] | None = None,
    partial_json: str | None = None,
) -> str:
    """Descriptive action text, e.g. "Reading config.ts".

    Context is optional: when the extractor finds nothing (or the
    arguments are malformed) the bare verb phrase is returned.
    """
    action = get_tool_action(tool_name)
    verb = action.verbs[_status_key(status)]
    if action.context is None:
        return verb
    args = arguments if isinstance(arguments, dict) else {}
    context = action.context(args, partial_json)
    if context:
        return f"{verb} {context}"
    return verb


def action_verb(tool_name: str, status: ToolStatus | str = ToolStatus.RUNNING) -> str:
    """Verb phrase without context, for compact displays."""
    return get_tool_action(tool_name).verbs[_status_key(status)]


def action_category(tool_name: str) -> str:
    return get_tool_action(tool_name).category


def is_file_related_tool(tool_name: str) -> bool:
    return action_category(tool_name) in ("file", "edit")


def is_terminal_related_tool(tool_name: str) -> bool:
    return action_category(tool_name) == "terminal"


def is_search_related_tool(tool_name: str) -> bool:
    return action_category(tool_name) == "search"


def is_web_related_tool(tool_name: str) -> bool:
    return action_category(tool_name) in ("web", "browser")
