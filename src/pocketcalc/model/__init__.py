"""
The MODEL layer contains pure data structures and calculator logic.
It has NO knowledge of the GUI (Qt).
It deals with input validation, expression evaluation and the edit buffer.
"""
