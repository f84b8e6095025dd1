"""Grid model built from executions: columns, rows, drilling, sorting and
row grouping."""

from .fields import *
from .tree import *
from .adapter import *
from .drilling import *
from .sorting import *
from .grouping import *
from .table import *
