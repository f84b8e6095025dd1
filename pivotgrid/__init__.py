"""Pivot table grid adapter"""

__version__ = "1.0"

from .errors import *
from .logging import *
from .config import *
from .execution import *
from .grid import *
