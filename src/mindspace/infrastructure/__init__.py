"""Infrastructure layer — device-local storage and the workspace.

The database package depends only on stdlib and SQLAlchemy. The workspace
is the bridge that owns the storage, the graph store, and the plugin manager.
"""
