"""
Generators — produce new configuration files from scanned project facts.

Each generator module exposes a ``generate_*()`` function that returns
a ``GeneratedFile`` instance.
"""
