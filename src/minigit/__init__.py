"""minigit - local single-user file versioning.

Track individual files, snapshot their full contents under increasing
version numbers and restore any snapshot on demand.
"""

from .constants import MINIGIT_VERSION as __version__
