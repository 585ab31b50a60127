"""Audio replay and config file I/O."""
