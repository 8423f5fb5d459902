"""
Aria Labels

Adds aria-hidden and aria-label attributes to rendered content blocks and
keeps itself up to date from its GitHub releases.
"""

__version__ = "2.0.3"
__author__ = "Aria Labels Team"
