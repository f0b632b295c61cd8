"""utils package – Small numeric and vector helpers."""

from .helpers import clamp, as_vector
