"""Component classes that define functionality and appearance."""

from trellis.classes.base import ComponentClass, ComponentClasses, ComponentClassFactory
from trellis.classes.background import BackgroundAttributes
from trellis.classes.container import ContainerClass
from trellis.classes.button import ButtonClass, ButtonAttributes

__all__ = [
    "ComponentClass", "ComponentClasses", "ComponentClassFactory",
    "BackgroundAttributes",
    "ContainerClass",
    "ButtonClass", "ButtonAttributes",
]
