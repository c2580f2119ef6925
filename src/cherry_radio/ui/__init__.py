"""UI layer for Cherry Radio.

Contains:
- blessed: Terminal UI rendering the session snapshot and mapping keys to
  session commands
"""

__all__ = []
