"""
Test suite for diagram replay.

Focus areas:
- Event log ordering and recording
- Applier effects per event type
- Replay state machine timing and cancellation
- Editor gestures and the recording gate
"""
