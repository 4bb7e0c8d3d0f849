"""
Expression Buffer
=================
The single-line text the user is composing, with an explicit edit history.

Every mutation is recorded as one `Edit`, so typing a character, deleting one
or replacing the whole line with a result can each be undone in one step.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Edit:
    """One undoable step: the buffer text before and after it."""
    before: str
    after: str


class ExpressionBuffer:
    """Append-only line editor (the caret is always at the end)."""

    MAX_HISTORY = 200

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._undo: list[Edit] = []
        self._redo: list[Edit] = []

    @property
    def text(self) -> str:
        return self._text

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def _apply(self, new_text: str) -> None:
        self._undo.append(Edit(self._text, new_text))
        if len(self._undo) > self.MAX_HISTORY:
            self._undo = self._undo[-self.MAX_HISTORY:]
        self._redo.clear()
        self._text = new_text

    def append(self, chars: str) -> None:
        if not chars:
            return
        self._apply(self._text + chars)

    def backspace(self) -> bool:
        """Remove the last character. Returns False on an empty buffer."""
        if not self._text:
            return False
        self._apply(self._text[:-1])
        return True

    def replace_all(self, text: str, record: bool = False) -> None:
        """
        Swap the whole line for `text` as a single undoable step.

        An unchanged line is skipped unless `record` is set, in which case the
        step is kept so a later undo lands on it.
        """
        if text == self._text and not record:
            return
        self._apply(text)

    def clear(self) -> None:
        self.replace_all("")

    def undo(self) -> bool:
        if not self._undo:
            return False
        edit = self._undo.pop()
        self._redo.append(edit)
        self._text = edit.before
        logger.debug(f"Undo: '{edit.after}' -> '{edit.before}'")
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        edit = self._redo.pop()
        self._undo.append(edit)
        self._text = edit.after
        logger.debug(f"Redo: '{edit.before}' -> '{edit.after}'")
        return True

    def __len__(self) -> int:
        return len(self._text)
