__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'argwright'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .context import *
from .engine import *
from .entities import *
from .faults import *
from .markers import *
from .reflector import *
from .revivers import *
from .validator import *

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

# Load the exposed API of the ambient context
__all__ += context.__all__  # type: ignore[attr-defined]
# Load the exposed API of the engine
__all__ += engine.__all__  # type: ignore[attr-defined]
# Load the exposed API of the entities
__all__ += entities.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the markers
__all__ += markers.__all__  # type: ignore[attr-defined]
# Load the exposed API of the reflector
__all__ += reflector.__all__  # type: ignore[attr-defined]
# Load the exposed API of the revivers
__all__ += revivers.__all__  # type: ignore[attr-defined]
# Load the exposed API of the validator
__all__ += validator.__all__  # type: ignore[attr-defined]
