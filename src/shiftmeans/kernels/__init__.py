"""Mean-shift kernel strategies."""

from .base_kernel import BaseKernel
from .uniform import Uniform
from .gaussian import TruncatedGaussian

__all__ = [
    'BaseKernel',
    'Uniform',
    'TruncatedGaussian'
]
