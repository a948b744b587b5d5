"""Blueprint Tracker: bucket-based portfolio allocation tracking.

Buckets hold stock positions; the domain layer derives current vs. target
allocation, keeps bucket targets consistent, records an append-only
transaction trail, and materializes historical snapshots.
"""

__version__ = "0.1.0"
