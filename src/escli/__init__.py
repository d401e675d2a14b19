"""
escli - Elasticsearch administration from the command line
"""

__version__ = "0.3.0"

from .errors import EscliError
from .models import Config

__all__ = ["Config", "EscliError"]
