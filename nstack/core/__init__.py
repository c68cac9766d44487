"""Core building blocks: settings, errors, logging, detection and subprocess execution."""
