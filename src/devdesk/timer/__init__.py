"""
Focus timer.

Components:
- timer_models.py: modes, presets, custom duration, session records
- timer_engine.py: deadline-based countdown state machine
"""
