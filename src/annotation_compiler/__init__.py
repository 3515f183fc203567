"""LuaLS annotation compiler for scripting API references"""
from .config import Config, UnknownTypeError
from .generator import generate_api, main
from .model import Element, Module, Parameter, load_modules
from .registry import GenerationContext

__version__ = '1.0.0'

__all__ = [
    'Config',
    'Element',
    'GenerationContext',
    'Module',
    'Parameter',
    'UnknownTypeError',
    'generate_api',
    'load_modules',
    'main',
]
