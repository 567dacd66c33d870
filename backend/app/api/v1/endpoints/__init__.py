# API endpoints
from . import media

__all__ = ["media"]
