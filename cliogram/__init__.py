__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'cliogram'
__author__ = 'cliogram contributors'
__license__ = 'MIT'
# Kept in sync with pyproject.toml.
__version__ = "0.1.0"

from .descriptors import *
from .faults import *
from .grammar import *
from .handler import *
from .matcher import *
from .parser import *
from .resolver import *
from .usage import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Kept in sync with pyproject.toml.
version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the descriptors
__all__ += descriptors.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the grammar compiler
__all__ += grammar.__all__  # type: ignore[attr-defined]
# Load the exposed API of the command line boundary
__all__ += handler.__all__  # type: ignore[attr-defined]
# Load the exposed API of the matcher
__all__ += matcher.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser
__all__ += parser.__all__  # type: ignore[attr-defined]
# Load the exposed API of the resolver
__all__ += resolver.__all__  # type: ignore[attr-defined]
# Load the exposed API of the usage builder
__all__ += usage.__all__  # type: ignore[attr-defined]
