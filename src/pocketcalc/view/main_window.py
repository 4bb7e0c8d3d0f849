"""
Main Application Window
=======================
The top-level window hosting one calculator.

Why is this file needed?
------------------------
1. Layout: It gives the calculator widget a window with a title and size.
2. Routing: It hands window-wide keyboard shortcuts to the calculator.
"""
from typing import Optional

from PySide6.QtWidgets import QMainWindow

from pocketcalc import config
from pocketcalc.controller.calculator import Calculator
from pocketcalc.view.widgets.calculator_widget import CalculatorWidget


class MainWindow(QMainWindow):
    def __init__(self, calculator: Optional[Calculator] = None) -> None:
        super().__init__()
        self.setWindowTitle(config.VISIBLE_APP_NAME)
        self.resize(config.WINDOW_WIDTH, config.WINDOW_HEIGHT)

        self.calculator_widget = CalculatorWidget(calculator, parent=self)
        self.setCentralWidget(self.calculator_widget)
        self.calculator_widget.connect_keyboard(self)

    @property
    def calculator(self) -> Calculator:
        return self.calculator_widget.calculator
