"""
                Spice Heritage

Restaurant marketing site and admin dashboard backed by a realtime
record tree, object storage and a single privileged admin session.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
