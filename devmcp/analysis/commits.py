"""
Heuristic commit message suggestions.

Classifies the output of ``git diff --staged --name-status`` into a
conventional-commit type and summary. The rules are deliberately simple and
mixed changesets can land in a surprising bucket; the first matching rule
wins, except that touching a dependency manifest always yields ``chore``.
"""

from typing import List, Sequence

from devmcp.core.types import ChangeRecord, ChangeStatus, CommitSuggestion

DEPENDENCY_MANIFESTS = frozenset({
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "pyproject.toml",
    "requirements.txt",
    "poetry.lock",
    "Pipfile",
    "Pipfile.lock",
    "go.mod",
    "go.sum",
    "Cargo.toml",
    "Cargo.lock",
    "Gemfile",
    "Gemfile.lock",
    "composer.json",
    "composer.lock",
})

_STATUS_BY_CODE = {
    "A": ChangeStatus.ADDED,
    "M": ChangeStatus.MODIFIED,
    "D": ChangeStatus.DELETED,
    "R": ChangeStatus.RENAMED,
}


def parse_name_status(raw: str) -> List[ChangeRecord]:
    """Parse tab-separated name-status lines; renames keep the destination path."""
    records = []
    for line in raw.strip().splitlines():
        if not line.strip():
            continue
        parts = line.split("\t")
        code = parts[0].strip()
        path = parts[-1] if len(parts) > 1 else ""
        status = _STATUS_BY_CODE.get(code[:1], ChangeStatus.OTHER)
        records.append(ChangeRecord(status=status, path=path, code=code))
    return records


def _is_documentation(path: str) -> bool:
    return path.endswith(".md") or "readme" in path.lower()


def _is_test(path: str) -> bool:
    return "test" in path or "spec" in path


def classify_changes(changes: Sequence[ChangeRecord]) -> CommitSuggestion:
    added = [c for c in changes if c.status is ChangeStatus.ADDED]
    modified = [c for c in changes if c.status is ChangeStatus.MODIFIED]
    deleted = [c for c in changes if c.status is ChangeStatus.DELETED]

    if added and not modified and not deleted:
        commit_type = "feat"
        summary = f"add {len(added)} new files" if len(added) > 1 else f"add '{added[0].path}'"
    elif all(_is_documentation(c.path) for c in changes):
        commit_type, summary = "docs", "update documentation"
    elif any(_is_test(c.path) for c in changes):
        commit_type, summary = "test", "update tests"
    elif modified:
        commit_type = "fix"
        summary = f"update {len(modified)} files" if len(modified) > 1 else f"update '{modified[0].path}'"
    else:
        commit_type, summary = "chore", "update project structure"

    if any(c.path in DEPENDENCY_MANIFESTS for c in changes):
        commit_type, summary = "chore", "update dependencies or project config"

    body = "\n".join(f"- {c.code}: {c.path}" for c in changes)
    return CommitSuggestion(type=commit_type, summary=summary, body=body)


def render_commit_suggestion(suggestion: CommitSuggestion) -> str:
    return f"Suggested commit message:\n\n{suggestion.headline}\n\nChanges:\n{suggestion.body}"
