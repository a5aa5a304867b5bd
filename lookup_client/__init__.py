"""
Lookup Client — address lookup table client for Solana clusters.

Creates and extends address lookup tables through the lookup table program,
reads them back, and compares versioned transaction sizes with and without
a table reference.
"""

__version__ = "0.1.0"
