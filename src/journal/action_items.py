"""Action item extraction from lifelog markdown.

Two line forms are recognised (after trimming):

- checkbox: ``- [ ] text`` / ``* [ ] text``
- keyword: ``todo``, ``follow up``, ``follow-up``, ``remember to``,
  ``need to``, ``next step`` followed by ``:`` or whitespace

Checkbox detection runs first. Results are de-duplicated (first occurrence
wins) and items of two characters or fewer are dropped.
"""

from __future__ import annotations

import re
from typing import List, Optional

CHECKBOX_PATTERN = re.compile(r"^[-*] \[ \]\s*", re.IGNORECASE)
KEYWORDS = ("todo", "follow up", "follow-up", "remember to", "need to", "next step")
KEYWORD_PATTERN = re.compile(
    r"^(" + "|".join(re.escape(k) for k in KEYWORDS) + r")[:\s]", re.IGNORECASE
)
KEYWORD_PREFIX = re.compile(
    r"^(" + "|".join(re.escape(k) for k in KEYWORDS) + r")[:\s]*", re.IGNORECASE
)
MIN_ITEM_LENGTH = 3


def match_action_item(line: str) -> Optional[str]:
    """Return the action item payload of a single trimmed line, or None."""
    if CHECKBOX_PATTERN.match(line):
        return CHECKBOX_PATTERN.sub("", line, count=1)
    if KEYWORD_PATTERN.match(line):
        return KEYWORD_PREFIX.sub("", line, count=1)
    return None


def extract_action_items(text: str) -> List[str]:
    """Extract action items from newline-joined lifelog markdown."""
    items: List[str] = []
    for raw_line in (text or "").split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        item = match_action_item(line)
        if item is not None:
            items.append(item)

    # dict.fromkeys keeps first-seen order
    return [item for item in dict.fromkeys(items) if len(item.strip()) >= MIN_ITEM_LENGTH]
