__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'gcli'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .utils import *
from .faults import *
from .argument import *
from .tokenizer import *
from .conversion import *
from .types import *
from .basic import *
from .selection import *
from .canon import *
from .execution import *
from .requisition import *
from .system import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the utilities
__all__ += utils.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the arguments
__all__ += argument.__all__  # type: ignore[attr-defined]
# Load the exposed API of the tokenizer
__all__ += tokenizer.__all__  # type: ignore[attr-defined]
# Load the exposed API of the conversions
__all__ += conversion.__all__  # type: ignore[attr-defined]
# Load the exposed API of the type system
__all__ += types.__all__  # type: ignore[attr-defined]
# Load the exposed API of the basic types
__all__ += basic.__all__  # type: ignore[attr-defined]
# Load the exposed API of the selection types
__all__ += selection.__all__  # type: ignore[attr-defined]
# Load the exposed API of the canon
__all__ += canon.__all__  # type: ignore[attr-defined]
# Load the exposed API of the execution layer
__all__ += execution.__all__  # type: ignore[attr-defined]
# Load the exposed API of the requisition
__all__ += requisition.__all__  # type: ignore[attr-defined]
# Load the exposed API of the system
__all__ += system.__all__  # type: ignore[attr-defined]
