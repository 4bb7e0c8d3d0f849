from __future__ import annotations

from typing import Optional, Protocol

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QFontDatabase, QGuiApplication, QKeyEvent, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QGridLayout, QLabel, QLineEdit, QPushButton, QScrollArea, QSizePolicy,
    QVBoxLayout, QWidget
)

from pocketcalc.controller.calculator import (
    CLEAR_LABEL, EVALUATE_LABEL, Calculator, NamedKey
)

# Keypad rows; "=" takes the last two columns of the bottom row
BUTTON_ROWS = [
    [CLEAR_LABEL, "(", ")", "/"],
    ["7", "8", "9", "*"],
    ["4", "5", "6", "-"],
    ["1", "2", "3", "+"],
    ["0", ".", EVALUATE_LABEL],
]

NAMED_KEYS = {
    int(Qt.Key.Key_Return): NamedKey.RETURN,
    int(Qt.Key.Key_Enter): NamedKey.ENTER,
    int(Qt.Key.Key_Backspace): NamedKey.BACKSPACE,
}

COMMAND_MODIFIERS = (
    Qt.KeyboardModifier.ControlModifier
    | Qt.KeyboardModifier.AltModifier
    | Qt.KeyboardModifier.MetaModifier
)


class Clipboard(Protocol):
    def text(self) -> str: ...
    def setText(self, text: str) -> None: ...


class CalculatorWidget(QWidget):
    """
    Display line, error line and keypad of one calculator.

    The widget is the root content of the window. Call `connect_keyboard`
    once it is placed in a window to route shortcuts and key presses here.
    """

    def __init__(
        self,
        calculator: Optional[Calculator] = None,
        clipboard: Optional[Clipboard] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.calculator = calculator or Calculator(parent=self)
        self._clipboard = clipboard
        self._shortcuts: list[QShortcut] = []
        self.buttons: dict[str, QPushButton] = {}

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        root = QVBoxLayout(self)
        root.setContentsMargins(4, 4, 4, 4)
        root.setSpacing(4)

        # ---- display ----
        self.output = QLineEdit(self)
        self.output.setReadOnly(True)
        self.output.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.output.setFont(QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont))
        self.output.setText(self.calculator.text)
        root.addWidget(self.output)

        # ---- error line (horizontally scrollable) ----
        self.errline_label = QLabel(self)
        self.errline_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        self.errline = QScrollArea(self)
        self.errline.setWidget(self.errline_label)
        self.errline.setWidgetResizable(True)
        self.errline.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.errline.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.errline.setFixedHeight(self.errline_label.sizeHint().height() * 2)
        self.errline.hide()
        root.addWidget(self.errline)

        # ---- keypad ----
        grid = QGridLayout()
        grid.setSpacing(4)
        for row, labels in enumerate(BUTTON_ROWS):
            for column, label in enumerate(labels):
                button = self._add_button(label)
                column_span = 2 if label == EVALUATE_LABEL else 1
                grid.addWidget(button, row, column, 1, column_span)
        root.addLayout(grid, 1)

        equals = self.buttons[EVALUATE_LABEL]
        equals.setStyleSheet("QPushButton { font-weight: bold; }")

        self.calculator.text_changed.connect(self.output.setText)
        self.calculator.error_changed.connect(self._set_errline)

    def _add_button(self, label: str) -> QPushButton:
        button = QPushButton(label, self)
        button.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        button.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        button.clicked.connect(lambda _=False, key=label: self.calculator.press(key))
        self.buttons[label] = button
        return button

    @Slot(str, bool)
    def _set_errline(self, message: str, show: bool) -> None:
        self.errline_label.setText(message)
        if show:
            self.errline.horizontalScrollBar().setValue(0)
            self.errline.show()
        else:
            self.errline.hide()

    # ---- keyboard & clipboard ----

    def connect_keyboard(self, window: QWidget) -> None:
        """Route the window's key presses and clipboard shortcuts to this calculator."""
        window.setFocusProxy(self)
        self._shortcuts = [
            self._add_shortcut(window, QKeySequence.StandardKey.Copy, self.copy_to_clipboard),
            self._add_shortcut(window, QKeySequence.StandardKey.Paste, self.paste_from_clipboard),
            self._add_shortcut(window, QKeySequence.StandardKey.Undo, self.calculator.undo),
            self._add_shortcut(window, QKeySequence.StandardKey.Redo, self.calculator.redo),
        ]
        self.setFocus()

    @staticmethod
    def _add_shortcut(window: QWidget, key: QKeySequence.StandardKey, slot) -> QShortcut:
        shortcut = QShortcut(QKeySequence(key), window)
        shortcut.setContext(Qt.ShortcutContext.WindowShortcut)
        shortcut.activated.connect(slot)
        return shortcut

    def clipboard(self) -> Clipboard:
        if self._clipboard is not None:
            return self._clipboard
        return QGuiApplication.clipboard()

    @Slot()
    def copy_to_clipboard(self) -> None:
        self.clipboard().setText(self.calculator.on_copy())

    @Slot()
    def paste_from_clipboard(self) -> None:
        self.calculator.on_paste(self.clipboard().text())

    def keyPressEvent(self, event: QKeyEvent) -> None:
        key = NAMED_KEYS.get(int(event.key()))
        if key is not None:
            self.calculator.on_typed_key(key)
            event.accept()
            return

        text = event.text()
        if text and text.isprintable() and not (event.modifiers() & COMMAND_MODIFIERS):
            for char in text:
                self.calculator.on_typed_char(char)
            event.accept()
            return

        super().keyPressEvent(event)
