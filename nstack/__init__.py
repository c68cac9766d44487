"""nstack - scaffold Next.js projects and add features to them."""

__version__ = "0.3.0"
