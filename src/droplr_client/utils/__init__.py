"""
Utility functions for scripts.
"""
from .session_factory import get_session

__all__ = ['get_session']
