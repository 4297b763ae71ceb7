"""
Parser for ini-style repository definition files.

Used for dnf/yum ``.repo`` files and for ``pacman.conf``. A section starts at
a line beginning with ``[<id>]`` and runs up to (not including) the next such
line, or to the end of the text. Section bodies keep their header line and
original line endings so callers can splice edits back byte-for-byte.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

# Ids never contain "]" or a line break
SECTION_HEADER_PATTERN = re.compile(r"^\[([^\]\r\n]*)\]", re.MULTILINE)

ENABLED_VALUES = ("1", "true", "yes", "on")


@dataclass
class RepositorySection:
    """A bracket-delimited section of a repository definition file."""

    id: str
    raw_body: List[str] = field(default_factory=list)
    start_offset: int = 0
    end_offset: int = 0

    @property
    def text(self) -> str:
        """Section body as a single string, header line included."""
        return "".join(self.raw_body)


def header_pattern(repo_id: str) -> Optional[re.Pattern]:
    """Pattern for an exact ``[repo_id]`` header, or None for an impossible id."""
    if not SECTION_HEADER_PATTERN.fullmatch(f"[{repo_id}]"):
        return None
    return re.compile(r"^\[" + re.escape(repo_id) + r"\]", re.MULTILINE)


def parse_sections(content: str) -> List[RepositorySection]:
    """
    Split file content into sections in file order.

    Duplicate ids are all returned; text before the first header is not
    part of any section.
    """
    matches = list(SECTION_HEADER_PATTERN.finditer(content))
    sections = []

    for index, match in enumerate(matches):
        start = match.start()
        end = matches[index + 1].start() if index + 1 < len(matches) else len(content)
        sections.append(
            RepositorySection(
                id=match.group(1),
                raw_body=content[start:end].splitlines(keepends=True),
                start_offset=start,
                end_offset=end,
            )
        )

    return sections


def extract_all_sections(content: str) -> Dict[str, str]:
    """Map every section id to its body; the last duplicate wins."""
    return {section.id: section.text for section in parse_sections(content)}


def _find_section_range(content: str, repo_id: str) -> Optional[Tuple[int, int]]:
    """Offsets of the last section whose header is exactly ``[repo_id]``."""
    pattern = header_pattern(repo_id)
    if pattern is None:
        return None

    matches = list(pattern.finditer(content))
    if not matches:
        return None

    start = matches[-1].start()
    following = SECTION_HEADER_PATTERN.search(content, matches[-1].end())
    end = following.start() if following else len(content)
    return start, end


def extract_section(content: str, repo_id: str) -> str:
    """Return one section's body, or an empty string if the id is absent."""
    section_range = _find_section_range(content, repo_id)
    if section_range is None:
        return ""
    start, end = section_range
    return content[start:end]


def _key_pattern(key: str) -> re.Pattern:
    return re.compile(r"^(\s*" + re.escape(key) + r"\s*=\s*)(.*?)(\s*)$")


def get_section_value(body: str, key: str) -> Optional[str]:
    """Return the value of the first ``key=value`` line in a section body."""
    pattern = _key_pattern(key)
    for line in body.splitlines():
        match = pattern.match(line)
        if match:
            return match.group(2)
    return None


def is_section_enabled(body: str, enable_key: str = "enabled") -> Optional[bool]:
    """
    Read the enabled state of a section.

    Returns:
        True or False from the enable key, or None when the key is absent
        (the package manager then treats the section as enabled)
    """
    value = get_section_value(body, enable_key)
    if value is None:
        return None
    return value.strip().lower() in ENABLED_VALUES


def set_section_enabled(
    content: str, repo_id: str, enable: bool, enable_key: str = "enabled"
) -> Tuple[str, bool]:
    """
    Set the enable key of one section.

    Every enable-key line inside the section is rewritten; when the key is
    missing it is inserted directly after the header. Text outside the
    section is never touched.

    Args:
        content: Full file content
        repo_id: Exact section id
        enable: Desired state
        enable_key: Key holding the state

    Returns:
        Tuple of (new content, changed). ``changed`` is False when the
        section was already in the desired state or does not exist.
    """
    section_range = _find_section_range(content, repo_id)
    if section_range is None:
        return content, False

    start, end = section_range
    desired = "1" if enable else "0"
    pattern = _key_pattern(enable_key)
    lines = content[start:end].splitlines(keepends=True)

    key_found = False
    changed = False
    for index, line in enumerate(lines[1:], start=1):
        body = line.rstrip("\r\n")
        match = pattern.match(body)
        if not match:
            continue
        key_found = True
        if (match.group(2).strip().lower() in ENABLED_VALUES) == enable:
            continue
        ending = line[len(body) :]
        lines[index] = match.group(1) + desired + match.group(3) + ending
        changed = True

    if not key_found:
        if not lines[0].endswith("\n"):
            lines[0] += "\n"
        lines.insert(1, f"{enable_key}={desired}\n")
        changed = True

    if not changed:
        return content, False

    return content[:start] + "".join(lines) + content[end:], True
