"""vSphere Triggered Alarm check with include/exclude filtering."""

__version__ = "0.1.0"
