"""bundleguard — static assertions for packaged JavaScript bundles."""

__version__ = "0.1.0"
