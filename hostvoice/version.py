"""
hostvoice version information.

Semantic versioning: MAJOR.MINOR.PATCH
- MAJOR: Incompatible API changes (including the cscript sentinel protocol)
- MINOR: Backwards-compatible functionality additions
- PATCH: Backwards-compatible bug fixes
"""

__version__ = "0.3.0"
__version_info__ = (0, 3, 0)

# Version history
VERSION_HISTORY = {
    "0.3.0": "File output for every backend, command line options --backend and --list-backends",
    "0.2.0": "cscript backend for Windows with file output through the sentinel protocol",
    "0.1.0": "Initial version with espeak and say backends"
}


def get_version() -> str:
    """Get the current version string."""
    return __version__
