# SPDX-License-Identifier: MIT
"""
Ideas toolkit: inventory of idea folders, local projects, assistant plans
and dotfiles tooling, exposed through the ``icli`` command-line tool and the
``ideas-tui`` terminal dashboard.
"""

from ideas._version import __version__

__all__ = ["__version__"]
