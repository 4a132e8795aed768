"""
Diagram Replay CLI - record and replay diagram editing sessions

Commands:
- diagram-replay demo - Record a scripted session and replay it
- diagram-replay log show - Print the recorded event log
- diagram-replay version - Show version information
"""

__version__ = "0.1.0"
