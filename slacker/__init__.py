"""
Slacker Meter - Source Package

A personal time/earnings tracker: run a timer while you slack off,
watch the salary you are "earning" for it, and keep a history of
every session with daily, weekly and monthly totals.

DESIGN PRINCIPLES:
1. One service object owns all state, the UI only reads snapshots
2. Every history mutation is persisted immediately and in full
3. Time is injected, never read directly by the core
4. Statistics are pure functions of the history
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Slacker Meter Team"
