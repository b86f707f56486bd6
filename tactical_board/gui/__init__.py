"""
Tactical Board - GUI Module
Qt integration (requires the optional PyQt6 dependency)
"""

from tactical_board.gui.frame_scheduler import QtFrameScheduler

__all__ = ["QtFrameScheduler"]
