"""CreativePilot: ad-creative composer model and remove-bg relay."""

__version__ = "0.1.0"
