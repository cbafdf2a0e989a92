"""
Core tensor kernels and circuit specs for the simulation steps.

The kernels operate purely on arrays plus lightweight metadata (register
size, qubit position) and know nothing about placed items or noise models.
"""

from qcanvas.core import ir, jitted, kernels, meta

__all__ = ["ir", "jitted", "kernels", "meta"]
