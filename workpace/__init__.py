"""
Workpace: deadline pacing for serialized creative work.

Sub-packages:
    work_calendar   holidays, availability and workable hours
    work_progress   work documents, unit trees and progress
    pace_planning   deadline pace, urgency and the deadline overview
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
