# SPDX-License-Identifier: MIT
"""Core data model, errors and batch execution."""
