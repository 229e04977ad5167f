"""RADIUS attributes, packets, a UDP client, packet dumps and FreeRADIUS dictionary support."""

__version__ = "0.1.0"