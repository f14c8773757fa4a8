"""Infrastructure adapters plugged into the health twin core.

Storage backends and reminder schedulers live here so the core services only
depend on the protocols they declare.
"""
