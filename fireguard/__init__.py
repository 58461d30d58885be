"""FireGuard - wildfire risk prediction service for Canada."""

__version__ = "0.1.0"
