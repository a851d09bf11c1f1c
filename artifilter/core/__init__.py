"""ArtiFilter Core - Shared constants and validation.

Import specific names from submodules:
    from artifilter.core.constants import Field, ErrorCode
    from artifilter.core.validators import InvalidPatternError
"""

from artifilter.core import constants, validators

__all__ = [
    "constants",
    "validators",
]
