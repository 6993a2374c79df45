"""
Core domain logic.

Pure state machine, counter aggregation rules, result types and exceptions.
Nothing in this package performs I/O.
"""
