"""
Report rendering for nearsky.

Both renderers take (snapshot, location) and return text; writing or
printing the result is left to the caller.
"""

from nearsky.presentation import console, html

__all__ = ['console', 'html']
