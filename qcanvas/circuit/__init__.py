from .linearizer import expand_items, linearize, resolve_gate  # noqa: F401
