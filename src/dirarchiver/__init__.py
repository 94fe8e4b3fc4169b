"""Archive directory trees described by a JSON profile into a single zip file."""

__version__ = "0.1.0"
