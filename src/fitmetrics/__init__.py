"""Fitness metrics and progress analytics.

Pure calculations over logged workouts, meals and body weight: energy
expenditure, nutrient consumption versus targets, weight series, trend
deltas and workout consistency streaks.
"""

__version__ = "0.1.0"
