"""Cell - atomic unit of the character grid.

A cell is a plain one-character string. Text coming from outside the engine
(typing, paste, persisted data, undo entries) passes through normalize_char
before it is stored.
"""

BLANK = ' '

Position = tuple[int, int]


def normalize_char(text: str | None) -> str:
    """Return the first character of text, or a space if there is none."""
    if not text:
        return BLANK
    return text[0]


def is_blank(cell: str) -> bool:
    """Check if a cell holds the blank character."""
    return cell == BLANK
