from .main import typestencil

__all__ = ["typestencil"]
