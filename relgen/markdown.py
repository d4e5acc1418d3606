"""Extract one section of a markdown document and rewrite it as lint-clean markdown."""

import re
from collections.abc import Iterator
from typing import TextIO

_HEADING = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
_FENCE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_BULLET = re.compile(r"^(\s*)[*+](\s+)")
_LIST_ITEM = re.compile(r"^\s*(?:[-*+]|\d{1,9}[.)])(?:\s|$)")


def _closes(marker: str, fence: str) -> bool:
    return marker[0] == fence[0] and len(marker) >= len(fence)


def _headings(lines: list[str]) -> Iterator[tuple[int, int, str]]:
    """Yield (line index, level, text) for every ATX heading outside fenced code."""
    fence: str | None = None
    for index, line in enumerate(lines):
        fence_match = _FENCE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif _closes(marker, fence):
                fence = None
            continue
        if fence is not None:
            continue
        heading = _HEADING.match(line)
        if heading:
            yield index, len(heading.group(1)), (heading.group(2) or "").strip()


def extract_section(body: str, section_title: str) -> list[str] | None:
    """Return the lines under the first heading titled ``section_title``, or None.

    The title comparison is case-insensitive. The section ends at the next
    heading of the same or a higher level.
    """
    lines = body.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    headings = list(_headings(lines))
    wanted = section_title.strip().lower()
    for position, (index, level, text) in enumerate(headings):
        if text.lower() != wanted:
            continue
        end = next((i for i, lvl, _ in headings[position + 1 :] if lvl <= level), len(lines))
        return lines[index + 1 : end]
    return None


def _ensure_blank(out: list[str]) -> None:
    if out and out[-1]:
        out.append("")


def lint_clean(lines: list[str]) -> list[str]:
    """Rewrite section lines so they pass the usual markdownlint rules.

    Sub-headings are rebased so the shallowest one is ``##``, bullets use
    ``-``, headings, fences and lists are surrounded by blank lines, trailing
    whitespace and repeated blank lines are dropped. Fenced code is kept
    verbatim.
    """
    levels = [level for _, level, _ in _headings(lines)]
    shift = 2 - min(levels) if levels else 0

    out: list[str] = []
    fence: str | None = None
    in_list = False
    for raw in lines:
        fence_match = _FENCE.match(raw)
        if fence is not None:
            if fence_match and _closes(fence_match.group(1), fence):
                out.append(raw.rstrip())
                out.append("")
                fence = None
            else:
                out.append(raw)
            continue

        line = raw.rstrip()
        if fence_match:
            fence = fence_match.group(1)
            in_list = False
            _ensure_blank(out)
            out.append(line)
            continue

        heading = _HEADING.match(line)
        if heading:
            level = max(1, min(len(heading.group(1)) + shift, 6))
            in_list = False
            _ensure_blank(out)
            out.append(f"{'#' * level} {(heading.group(2) or '').strip()}".rstrip())
            out.append("")
            continue

        line = _BULLET.sub(r"\1-\2", line)
        if line:
            item = _LIST_ITEM.match(line) is not None
            # Indented lines continue the current list item
            continued = in_list and line[0].isspace()
            if item != in_list and not continued:
                _ensure_blank(out)
            in_list = item or continued
        if not line and (not out or not out[-1]):
            continue
        out.append(line)

    while out and not out[-1]:
        out.pop()
    return out


def write_markdown_section(body: str, section_title: str, sink: TextIO, lint_clean_output: bool = True) -> bool:
    """Write the ``section_title`` section of ``body`` to ``sink``.

    Returns False, writing nothing, when the section is absent.
    """
    section = extract_section(body, section_title)
    if section is None:
        return False
    lines = lint_clean(section) if lint_clean_output else section
    if lines:
        sink.write("\n".join(lines) + "\n")
    return True
