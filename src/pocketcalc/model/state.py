"""
Calculator State (Data Model)
=============================
Holds everything one calculator window owns: the expression buffer and the
error line status.

Classes:
    ErrorStatus: Message and visibility of the error line.
    CalculatorState: The main container class.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from pocketcalc.model.editor import ExpressionBuffer


@dataclass
class ErrorStatus:
    message: str = ""
    visible: bool = False

    def show(self, message: str) -> None:
        self.message = message
        self.visible = True

    def hide(self) -> None:
        self.message = ""
        self.visible = False


@dataclass
class CalculatorState:
    buffer: ExpressionBuffer = field(default_factory=ExpressionBuffer)
    error: ErrorStatus = field(default_factory=ErrorStatus)
