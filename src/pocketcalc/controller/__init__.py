"""
The CONTROLLER layer turns input events into model changes and reports them
through Qt signals.
"""
