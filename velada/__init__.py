"""
velada
La Velada del Año combat voting backend
"""

__version__ = "1.0.0"
