# CPU Preview Package
# Numeric thumbnails and read-outs for single nodes

from .interpreter import (
    PreviewInterpreter, PreviewSample, evaluate_preview, render_preview, DEFAULT_MAX_DEPTH,
)

__all__ = ['PreviewInterpreter', 'PreviewSample', 'evaluate_preview', 'render_preview',
           'DEFAULT_MAX_DEPTH']
