"""Documentation lookup for extracted configurations."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .logging import get_logger
from .models import ExtractedRecord

DEFAULT_DOC_MARKER = "##"

_LOGGER = get_logger("docs")


def parse_doc_comments(text: str, marker: str = DEFAULT_DOC_MARKER) -> Optional[str]:
    """Collect the leading doc-comment block of a module's source.

    Blank lines are skipped wherever they appear. The first line that is
    neither blank nor a doc-comment line ends the scan, even if the block
    already started.
    """
    lines: List[str] = []
    for line in text.splitlines():
        if line.startswith(marker):
            content = line[len(marker):]
            if content[:1].isspace():
                content = content[1:]
            lines.append(content)
        elif line.strip():
            break
    if not lines:
        return None
    return "\n".join(lines)


def read_file_docs(path: Path, marker: str = DEFAULT_DOC_MARKER) -> Optional[str]:
    """Return the doc-comment block at the top of ``path`` or None."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _LOGGER.debug("Could not read %s for documentation: %s", path, exc)
        return None
    return parse_doc_comments(text, marker)


def resolve_docs(
    record: ExtractedRecord, path: Path, marker: str = DEFAULT_DOC_MARKER
) -> Optional[str]:
    """Prefer the record's own description; fall back to the file's doc comments."""
    if record.documentation is not None:
        return record.documentation
    return read_file_docs(path, marker)


__all__ = ["DEFAULT_DOC_MARKER", "parse_doc_comments", "read_file_docs", "resolve_docs"]
