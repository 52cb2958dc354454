"""search-terminal - terminal front-end for a file-search backend."""

__version__ = "1.0.0"
__logo__ = ">_"
