"""Plugins: the built-in `core` root plugin and the plugin interface."""
