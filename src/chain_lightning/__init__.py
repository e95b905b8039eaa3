"""Chain Lightning - Parallel dependency loading for ES module components.

Chain Lightning renders import maps, module scripts and preload hints from a
build-time manifest so that ES module components load their shared chunks in
parallel instead of discovering them one request at a time.

Core principles:
- One manifest, loaded once and never mutated
- One render session per page: every script and chunk is emitted at most once
- Cache-aware: an optional cache oracle decides between inline and external
- Graceful degradation: render-time problems produce warnings, never errors
"""

__version__ = "0.1.0"
__author__ = "Chain Lightning Contributors"
