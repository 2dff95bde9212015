"""CLI package.

The ``cli`` sub-package contains the Click application and all
command implementations. Package imports happen inside each command
so that ``--help`` stays fast.
"""
from __future__ import annotations
