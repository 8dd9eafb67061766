"""
SnakeGate - a terminal snake game with staged missions, items and gates.
"""

__version__ = "1.0.0"
