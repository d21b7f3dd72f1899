"""
bytestashy - push, browse and manage ByteStash snippets from the terminal.

This CLI provides:
- Login with an API key stored in the OS keyring
- Creating and updating snippets from local files (multipart upload)
- Paginated listing and sorted search
- Fetching a snippet's files back to disk
- Deleting snippets
"""

__version__ = "0.3.1"
__app_name__ = "bytestashy"
