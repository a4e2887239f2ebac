"""Transport tiers delivering prepared payloads to storage."""

from .transport_selector import TransportSelector

__all__ = ["TransportSelector"]
