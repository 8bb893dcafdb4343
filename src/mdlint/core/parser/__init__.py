"""Markdown parsing into an immutable block/inline tree."""
from .document import DocumentBuilder, parse_document
from .nodes import Block, Document, Inline, NodeKind

__all__ = ["DocumentBuilder", "parse_document", "Block", "Document", "Inline", "NodeKind"]
