"""
Tactical Board - Board Module
"""

from tactical_board.board.controller import TacticalBoard

__all__ = ["TacticalBoard"]
