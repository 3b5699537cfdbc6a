"""Process entry point for recording purchase bundles."""
