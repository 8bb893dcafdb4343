"""Core modules for markdown parsing and linting."""
from .frontmatter import FrontMatter, split_front_matter
from .parser import Document, parse_document

__all__ = [
    "FrontMatter",
    "split_front_matter",
    "Document",
    "parse_document",
]
