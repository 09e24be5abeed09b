"""Small parsing and rounding helpers shared by the profiler modules."""
