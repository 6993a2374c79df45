"""
Upload tracker service.

Issues time-limited upload permissions for batches of items and aggregates
per-item lifecycle transitions into one job-level status.
"""
