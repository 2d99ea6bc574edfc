"""Cross-machine synchronization through a shared, version-controlled directory.

- **git**: ``git`` CLI wrapper
- **reconciler**: Remote capture (export) and repository restore (import)
- **transfer**: Context export/import and meta-repo push/pull
"""
