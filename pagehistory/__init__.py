"""
Page History Engine

Reverse replay of page commit logs: reconstructs every past state of a
line-based document from its current state and its edit history.
"""

__version__ = "0.1.0"
