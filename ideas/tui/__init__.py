# SPDX-License-Identifier: MIT
"""Terminal dashboard for the ideas toolkit."""
