"""
nsort - sort files into folders by extension

nsort moves the files of a directory into subfolders chosen from a
persistent extension to folder mapping, or from the raw extension.
"""

from .core import main

__all__ = ["main"]
