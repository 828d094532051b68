"""
The MODEL layer contains pure data structures: materials, boundary
conditions, source terms, run configuration and field snapshots.
"""
