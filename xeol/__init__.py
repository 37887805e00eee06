"""End-of-life database store, listing and metadata files, distro detection and events."""

__version__ = "0.1.0"