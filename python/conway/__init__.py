from conway._logging import *
from conway.buffers import *
from conway.config import *
from conway.exception import *
from conway.hashing import *
from conway.render import *
from conway.rules import *
from conway.seeding import *
from conway.simulation import *

from conway import patterns, reference

__version__ = (0, 1, 0)
