from pomoplus.models.base import Base
from pomoplus.models.config_entry import ConfigEntry
from pomoplus.models.session import Session
from pomoplus.models.tag import Tag

__all__ = [
    "Base",
    "ConfigEntry",
    "Session",
    "Tag",
]
