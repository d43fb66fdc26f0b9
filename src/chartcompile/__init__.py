"""
Chart Compile Core

Compile-time resolution of layout sizes and mark value references for a
declarative chart compiler.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Parsing the raw chart specification
    - Computing scale domains or ranges
    - Axis and legend assembly
    - Rendering pixels

It consumes a view tree plus scale/encoding metadata and produces
structured references for a downstream renderer to interpret.
"""

__version__ = "0.1.0"
