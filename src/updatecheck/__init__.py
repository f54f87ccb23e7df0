"""Update checks for client applications: release cache and version resolution."""

__version__ = "0.1.0"
