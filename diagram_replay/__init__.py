"""
Diagram Replay

Event recording and deterministic replay for an interactive diagram editor.
"""

__version__ = "0.1.0"
