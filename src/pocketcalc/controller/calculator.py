"""
Calculator Controller
=====================
Routes buttons, typed keys and clipboard shortcuts to the expression buffer
and runs the evaluate action.

Why is this file needed?
------------------------
1. Dispatch: Buttons and the keyboard share one registry of actions, so a
   typed "7" behaves exactly like tapping the 7 button.
2. Decoupling: The view only forwards events and listens to the signals
   below. All calculator behaviour can be driven without any widgets.
"""
from __future__ import annotations

import logging
import re
import string
from enum import Enum, auto
from functools import partial
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from PySide6.QtCore import QObject, Signal

from pocketcalc.model.expression import EvaluationError, ParseError, parse
from pocketcalc.model.state import CalculatorState
from pocketcalc.model.validation import InvalidInputError, validate
from pocketcalc.utils import describe_value, format_number, is_real_number

logger = logging.getLogger(__name__)

CLEAR_LABEL = "C"
EVALUATE_LABEL = "="
CHARACTER_LABELS = "()/*-+."

# Pasted text is only taken when it is a plain decimal number
PLAIN_NUMBER = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


class NamedKey(Enum):
    """Keys without a character of their own."""
    RETURN = auto()
    ENTER = auto()
    BACKSPACE = auto()


class Calculator(QObject):
    """One calculator: buffer, error line and the button registry."""
    text_changed = Signal(str)
    error_changed = Signal(str, bool)

    def __init__(self, state: Optional[CalculatorState] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.state = state or CalculatorState()

        buttons: dict[str, Callable[[], None]] = {}
        for digit in string.digits:
            buttons[digit] = partial(self.character, digit)
        for char in CHARACTER_LABELS:
            buttons[char] = partial(self.character, char)
        buttons[CLEAR_LABEL] = self.clear
        buttons[EVALUATE_LABEL] = self.evaluate
        # comma of other locales, no visible button
        buttons[","] = partial(self.character, ".")

        self._buttons: Mapping[str, Callable[[], None]] = MappingProxyType(buttons)

    # ---- read access ----

    @property
    def buttons(self) -> Mapping[str, Callable[[], None]]:
        return self._buttons

    @property
    def text(self) -> str:
        return self.state.buffer.text

    @property
    def error_message(self) -> str:
        return self.state.error.message

    @property
    def error_visible(self) -> bool:
        return self.state.error.visible

    # ---- buffer actions ----

    def character(self, char: str) -> None:
        self.state.buffer.append(char)
        self.text_changed.emit(self.text)

    def backspace(self) -> None:
        if self.state.buffer.backspace():
            self.text_changed.emit(self.text)

    def clear(self) -> None:
        self._replace_text("")

    def undo(self) -> None:
        if self.state.buffer.undo():
            self.text_changed.emit(self.text)

    def redo(self) -> None:
        if self.state.buffer.redo():
            self.text_changed.emit(self.text)

    def _replace_text(self, text: str, record: bool = False) -> None:
        before = self.text
        self.state.buffer.replace_all(text, record=record)
        if self.text != before:
            self.text_changed.emit(self.text)

    # ---- error line ----

    def _show_error(self, message: str) -> None:
        self.state.error.show(message)
        self.error_changed.emit(message, True)

    def _hide_error(self) -> None:
        self.state.error.hide()
        self.error_changed.emit("", False)

    # ---- evaluate ----

    def evaluate(self) -> None:
        """
        Evaluate the buffer and replace it with the result.

        On any failure the buffer stays as it is and the error line shows
        what went wrong.
        """
        source = self.text

        try:
            sanitised = validate(source)
        except InvalidInputError as e:
            logger.debug(f"Rejected '{source}' at position {e.position}: '{e.run}'")
            self._show_error(f"Invalid input at: {e.run}")
            return

        try:
            expression = parse(sanitised)
        except ParseError as e:
            logger.debug(f"Could not parse '{sanitised}': {e}")
            self._show_error(str(e))
            return

        try:
            result = expression.evaluate()
        except EvaluationError as e:
            logger.debug(f"Could not evaluate '{sanitised}': {e}")
            self._show_error(str(e))
            return

        if not is_real_number(result):
            logger.debug(f"Result of '{sanitised}' is not numeric: {result!r}")
            self._show_error(f"Result is not numeric: {describe_value(result)}")
            return

        # "12=" still leaves one undo step behind
        self._replace_text(format_number(result), record=True)
        self._hide_error()

    # ---- dispatch ----

    def press(self, label: str) -> None:
        """Invoke the action bound to a button label."""
        action = self._buttons.get(label)
        if action is None:
            raise KeyError(f"No button registered for label '{label}'")
        action()

    def on_typed_char(self, char: str) -> None:
        """A printable character typed on the keyboard."""
        if char == "c":
            char = CLEAR_LABEL  # the button is using a capital C

        action = self._buttons.get(char)
        if action is not None:
            action()

    def on_typed_key(self, key: NamedKey) -> None:
        if key in (NamedKey.RETURN, NamedKey.ENTER):
            self.evaluate()
        elif key is NamedKey.BACKSPACE:
            self.backspace()

    def on_paste(self, content: str) -> bool:
        """
        Type clipboard content into the buffer.

        Returns:
            True if the content was a plain number and got inserted.
        """
        if not PLAIN_NUMBER.fullmatch(content):
            logger.debug(f"Ignored paste of '{content}'")
            return False

        for char in content:
            self.character(char)
        return True

    def on_copy(self) -> str:
        """The buffer verbatim, valid or not."""
        return self.text
