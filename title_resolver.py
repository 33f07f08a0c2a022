import logging
import re
from typing import Any, Optional

# --- Logging Setup ---
app_logger = logging.getLogger('hyperpage')

DEFAULT_TITLE = "Document"

# Fenced code regions, non-greedy so back-to-back blocks are removed separately
CODE_FENCE_RE = re.compile(r"```.*?```", re.DOTALL)


def _heading_text(line: str) -> Optional[str]:
    """Returns the text of a level-1 heading line, or None if the line is not one."""
    if len(line) < 2 or line[0] != '#' or not line[1].isspace():
        return None
    text = line[1:].strip()
    return text or None


def try_extract_title(markdown: Any) -> Optional[str]:
    """
    Finds the first level-1 heading in a markdown document.

    Fenced code blocks are removed before scanning so that a '# comment' inside
    a code sample is never mistaken for a heading. Lines such as '#   ' that
    carry no text are skipped and the scan continues.

    Returns the stripped heading text, or None when there is no usable heading
    or the input is not a string.
    """
    if not markdown or not isinstance(markdown, str):
        return None

    clean_markdown = CODE_FENCE_RE.sub('', markdown)

    for line in clean_markdown.split('\n'):
        title = _heading_text(line)
        if title:
            return title

    return None


def resolve_title(markdown: Any, explicit_title: Optional[str] = None) -> str:
    """
    Determines the page title.

    Priority:
        1. Explicit title, used verbatim when non-empty
        2. First level-1 heading in the markdown
        3. DEFAULT_TITLE
    """
    if explicit_title:
        app_logger.debug("Using explicit title")
        return explicit_title

    extracted_title = try_extract_title(markdown)
    if extracted_title:
        app_logger.debug(f"Extracted title from heading: {extracted_title!r}")
        return extracted_title

    app_logger.debug(f"No level-1 heading found, falling back to '{DEFAULT_TITLE}'")
    return DEFAULT_TITLE
