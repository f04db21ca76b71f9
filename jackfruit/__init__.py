__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'jackfruit'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .details import *
from .classification import *
from .merging import *
from .assembly import *
from .discovery import *
from .faults import *

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
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the details
__all__ += details.__all__  # type: ignore[attr-defined]
# Load the exposed API of the classification rules
__all__ += classification.__all__  # type: ignore[attr-defined]
# Load the exposed API of the merge engine
__all__ += merging.__all__  # type: ignore[attr-defined]
# Load the exposed API of the assembler
__all__ += assembly.__all__  # type: ignore[attr-defined]
# Load the exposed API of the discovery
__all__ += discovery.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
