"""
Command line entry points for SnakeGate.
"""
