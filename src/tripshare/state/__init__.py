"""State layer.

The trip store is the single source of truth for trips; the schedule,
vehicle and chat managers mutate it and trigger the matching broadcasts.
"""
