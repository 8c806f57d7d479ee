"""Infrastructure Layer: file storage, file watching and logging.

Invariants:
    - Storage failures are mapped to core errors (DataFileError, PersistError)
"""
