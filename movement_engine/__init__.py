"""
Movement hierarchy engine for data-center hardware logistics.

Zones, a strict transition topology, a single-writer movement executor,
and the inspection and recycling processes that run on the tick loop.
"""

__version__ = "0.1.0"
