"""Linear Connect — relays helpdesk conversations into Linear issues."""

__version__ = "0.1.0"
