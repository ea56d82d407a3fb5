"""Server core: settings, constants and authentication."""
