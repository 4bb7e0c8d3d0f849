"""
The VIEW layer holds the Qt widgets. It forwards user input to the
controller and renders what the controller reports.
"""
