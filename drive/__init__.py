"""Drive - personal file storage service.

Users own a tree of folders, upload files into it, and share file content
through short-lived signed links.
"""

__version__ = "1.0.0"
