"""Dependency resolution — constructor injection driven by type annotations.

    Container -- builds instances, binding interfaces to implementations
    TypeRegistry -- identifier -> class lookup with cached constructor specs
"""

from routeline.di.bindings import derive_concrete_name, is_interface, qualified_name
from routeline.di.container import Container
from routeline.di.descriptors import ConstructorSpec, Dependency, describe
from routeline.di.registry import TypeRegistry

__all__ = [
    "ConstructorSpec",
    "Container",
    "Dependency",
    "TypeRegistry",
    "derive_concrete_name",
    "describe",
    "is_interface",
    "qualified_name",
]
