"""Chinese chess: rules, a computer opponent, network play and a tkinter window."""

__version__ = "6.3.0"