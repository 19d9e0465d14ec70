"""Rolling hash and winnowing."""

from .rolling import MODULUS, RollingHash, symbol_value
from .winnow import Winnower

__all__ = ["MODULUS", "RollingHash", "Winnower", "symbol_value"]
