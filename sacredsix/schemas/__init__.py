# ruff: noqa: F403, F401
"""Schemas package initialization."""

from .base import *
from .collaboration import *
from .completion import *
from .goal import *
from .project import *
from .task import *
from .user import *
