"""Core building blocks: partial application and composition."""

from .curry import Curried, arity_of, curry, pipe

__all__ = ["Curried", "arity_of", "curry", "pipe"]
