"""Core application plumbing: settings, logging, metrics and wiring."""
