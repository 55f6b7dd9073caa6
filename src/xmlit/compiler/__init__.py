"""Compile validated template trees to Python code objects."""

from xmlit.compiler.core import Compiler

__all__ = ["Compiler"]
