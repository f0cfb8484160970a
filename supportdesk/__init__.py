"""SupportDesk: support-ticket tracker with live updates."""

__version__ = "0.1.0"
