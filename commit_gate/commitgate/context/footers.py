"""Trailer (footer) line parsing for commit messages.

Footers live in the last paragraph of a commit message, e.g.::

    Fix the frobnicator

    Change-Id: I8473b95934b5732ac55d26311a706c9c2bde9940
    Signed-off-by: Jane Doe <jane@example.com>

A message made of a single paragraph has no footers; its only paragraph is
the subject.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

CHANGE_ID = "Change-Id"
SIGNED_OFF_BY = "Signed-off-by"

FOOTER_RE = re.compile(r"^([A-Za-z0-9-]+):\s*(.*)$")


class FooterLine(BaseModel):
    """A single ``Key: value`` trailer."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: str

    def matches(self, key: str) -> bool:
        """Footer keys compare case-insensitively."""
        return self.key.lower() == key.lower()

    def email_address(self) -> str | None:
        """Return the email in ``Name <email>`` form, or a bare address."""
        lt = self.value.find("<")
        if lt >= 0:
            gt = self.value.find(">", lt)
            if gt < 0:
                return None
            return self.value[lt + 1:gt]
        if "@" in self.value:
            return self.value.strip()
        return None


def split_paragraphs(message: str) -> list[list[str]]:
    """Split a message into paragraphs separated by blank lines."""
    paragraphs: list[list[str]] = []
    current: list[str] = []
    for line in message.splitlines():
        if line.strip():
            current.append(line)
        elif current:
            paragraphs.append(current)
            current = []
    if current:
        paragraphs.append(current)
    return paragraphs


def parse_footer_lines(message: str) -> list[FooterLine]:
    """Parse the trailer block of *message* into footer lines."""
    paragraphs = split_paragraphs(message)
    if len(paragraphs) < 2:
        return []

    footers: list[FooterLine] = []
    for line in paragraphs[-1]:
        if line[:1].isspace():
            # Continuation of the previous footer's value
            if footers:
                prev = footers[-1]
                footers[-1] = FooterLine(
                    key=prev.key, value=f"{prev.value} {line.strip()}"
                )
            continue
        match = FOOTER_RE.match(line)
        if match:
            footers.append(FooterLine(key=match.group(1), value=match.group(2).strip()))
    return footers


def footer_values(footers: list[FooterLine], key: str) -> list[str]:
    return [f.value for f in footers if f.matches(key)]
