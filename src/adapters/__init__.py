"""Adapters: everything that performs I/O against the Mochi API or the filesystem."""
