# sitemark/markdown/preprocessors/__init__.py

from .fence_meta import fence_meta

PREPROCESSORS = [
    fence_meta,  # Keep fence language and meta through Pandoc
    # Order matters - they run sequentially
]


def apply_preprocessors(text, context):
    """Apply all preprocessors in order"""
    for processor in PREPROCESSORS:
        text = processor(text, context)
    return text
