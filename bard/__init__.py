"""
Bard - AI story generator.

Seed idea -> plot -> multi-part markdown story -> HTML.
"""

__version__ = "1.0.0"
