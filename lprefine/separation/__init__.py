"""
Separation module - finds valid inequalities violated by an LP point.

This module provides:
- LSInequality: An (l,S)-inequality for uncapacitated lot sizing
- separate_ls_inequalities: One separation pass over all periods
- LSSeparator: Separator bound to an instance's demand table
"""

from lprefine.separation.ls_inequalities import (
    LSInequality,
    LSSeparator,
    separate_ls_inequalities,
)

__all__ = [
    'LSInequality',
    'LSSeparator',
    'separate_ls_inequalities',
]
