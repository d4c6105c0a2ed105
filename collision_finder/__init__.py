"""Find and remove directory computer objects that collide with a host about to join a domain."""

__version__ = "1.0.0"
