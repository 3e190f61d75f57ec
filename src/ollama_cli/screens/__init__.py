"""
Textual screens for the bundled markdown pager.
"""
from .markdown_pager import MarkdownPagerApp

__all__ = ["MarkdownPagerApp"]
