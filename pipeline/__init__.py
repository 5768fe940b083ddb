"""
Pipeline Module
Per-story acquisition: text cascade, visual cascade and comment transcripts
"""
from .content import ContentAcquirer, PLACEHOLDER_TEXT, HN_SOURCE, derive_source
from .transcript import render_comment_tree
from .acquisition import AcquisitionPipeline

__all__ = [
    "ContentAcquirer",
    "PLACEHOLDER_TEXT",
    "HN_SOURCE",
    "derive_source",
    "render_comment_tree",
    "AcquisitionPipeline",
]
