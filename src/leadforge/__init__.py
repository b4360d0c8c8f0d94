"""LeadForge lead dashboard core.

This package classifies business leads, resolves their acquisition channel,
normalizes phone numbers for messaging deep links, and maintains the
operator-facing lead board on top of an external data store.
"""

__version__ = "0.1.0"
