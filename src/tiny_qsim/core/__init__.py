"""Numeric kernel: dense linear algebra, gate matrices and bit helpers."""
from . import bits, linalg, matrices

__all__ = [
    'bits',
    'linalg',
    'matrices',
]
