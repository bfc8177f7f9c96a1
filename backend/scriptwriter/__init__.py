"""
Scriptwriter - turn a video idea into a short-form video script
"""

__version__ = "1.0.0"
