"""Zero-context line diffs between formatted snapshots."""

import difflib

HUNK_SEPARATOR = "---"
DIFF_INDENTATION = "    "


def snapshot_diff(previous: str, current: str) -> str:
    """Diff two formatted snapshots.

    Only changed lines are shown. Hunks are separated by ``---``, the shared
    leading indentation of the changed lines is removed (keeping two spaces
    after each ``-``/``+`` sign) and the whole block is indented four spaces.

    Returns:
        The indented diff, or an empty string when nothing changed
    """
    lines = _diff_lines(previous, current)
    if not lines:
        return ""
    return "\n".join(f"{DIFF_INDENTATION}{line}" for line in _reindent(lines))


def _diff_lines(previous: str, current: str) -> list[str]:
    diff = list(
        difflib.unified_diff(
            previous.splitlines(),
            current.splitlines(),
            n=0,
            lineterm="",
        )
    )
    lines: list[str] = []
    # Skip the "---"/"+++" file headers
    for line in diff[2:]:
        if line.startswith("@@"):
            if lines:
                lines.append(HUNK_SEPARATOR)
            continue
        lines.append(line)
    return lines


def _reindent(lines: list[str]) -> list[str]:
    changed = [line[1:] for line in lines if line != HUNK_SEPARATOR and line[1:].strip()]
    min_indentation = min(
        (len(content) - len(content.lstrip()) for content in changed),
        default=0,
    )
    reindented = []
    for line in lines:
        if line == HUNK_SEPARATOR:
            reindented.append(line)
        else:
            sign, content = line[0], line[1:]
            reindented.append(f"{sign}  {content[min_indentation:]}".rstrip())
    return reindented
