"""Error kinds reported by file commands.

Validation kinds (EmptyName, AbsolutePath, PathTraversal) live in
``safe_backup.validation.filename_validator``.
"""

SOURCE_NOT_FOUND = "SourceNotFound"
NO_BACKUP_FOUND = "NoBackupFound"
IO_ERROR = "IoError"
UNKNOWN_COMMAND = "UnknownCommand"
PROTECTED_FILE = "ProtectedFile"
