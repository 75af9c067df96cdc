"""Core components: the Result type, guards, combinators and sequencing.

This package holds the pieces every other module builds on; the public
names are re-exported from ``resultkit``.
"""
