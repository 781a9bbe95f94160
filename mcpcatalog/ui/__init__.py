"""Terminal rendering for the mcpcatalog CLI.

Tables go to stdout when they are the command's result; chrome goes to stderr.
"""

from __future__ import annotations

from mcpcatalog.ui.console import err_console, out_console

__all__ = ["err_console", "out_console"]
