"""File-tree formatting — render the project listing that goes into prompts."""

from __future__ import annotations

from typing import Collection, Sequence

from code_assist_gateway.domain.entities import FileEntry, FolderEntry, TreeNode

NO_FILES = "No files available"

_BRANCH = "├── "
_PIPE = "│   "

IGNORED_FILES: frozenset[str] = frozenset(
    {
        # Binary / media
        "*.ico", "*.png", "*.jpg", "*.jpeg", "*.gif", "*.svg", "*.webp",
        "*.mp3", "*.mp4", "*.wav", "*.woff", "*.woff2", "*.ttf", "*.eot",
        "*.zip", "*.tar", "*.gz", "*.pdf",
        # Logs / build output
        "*.log", "*.map", "*.min.js", "*.min.css", "*.pyc", "*.tsbuildinfo",
        # Lock files
        "package-lock.json", "yarn.lock", "pnpm-lock.yaml", "bun.lockb",
        "composer.lock", "poetry.lock",
        # Secrets / OS noise
        ".env", ".env.local", ".env.development", ".env.production",
        ".DS_Store", "Thumbs.db",
    }
)

IGNORED_FOLDERS: frozenset[str] = frozenset(
    {
        "node_modules",
        ".git",
        ".next",
        ".nuxt",
        ".vercel",
        ".cache",
        "dist",
        "build",
        "out",
        "coverage",
        "__pycache__",
        ".venv",
        "venv",
        "vendor",
    }
)


def is_ignored_file(name: str, patterns: Collection[str] = IGNORED_FILES) -> bool:
    """Return *True* if *name* equals a pattern or ends with its wildcard-stripped form."""
    return any(
        name == pattern or name.endswith(pattern.replace("*", "", 1))
        for pattern in patterns
    )


def _sort_key(node: TreeNode) -> tuple[int, str]:
    return (0 if isinstance(node, FolderEntry) else 1, node.name)


def format_file_tree(
    items: Sequence[TreeNode] | None,
    prefix: str = "",
    *,
    ignored_files: Collection[str] = IGNORED_FILES,
    ignored_folders: Collection[str] = IGNORED_FOLDERS,
) -> str:
    """Render *items* as a box-drawing tree, folders first.

    Returns ``"No files available"`` when *items* is missing or not a
    sequence, and ``""`` when every node is filtered out.
    """
    if items is None or isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
        return NO_FILES

    lines: list[str] = []
    for node in sorted(items, key=_sort_key):
        if isinstance(node, FolderEntry):
            if node.name in ignored_folders:
                continue
            lines.append(f"{prefix}{_BRANCH}{node.name}/")
            nested = format_file_tree(
                node.children,
                prefix + _PIPE,
                ignored_files=ignored_files,
                ignored_folders=ignored_folders,
            )
            if nested:
                lines.append(nested)
        elif isinstance(node, FileEntry):
            if is_ignored_file(node.name, ignored_files):
                continue
            lines.append(f"{prefix}{_BRANCH}{node.name}")
    return "\n".join(lines)
