"""Configuration, layout discovery, config patching and the pipeline runner."""
