"""
Content sync pipeline module.

This module orchestrates a complete sync run:
    1. Metadata collection (src.collectors)
    2. Image download (src.sync.fetcher)
    3. Post creation (src.sync.builder)
    4. Optional site build (src.pipeline.build)

Usage:
    # CLI interface
    uv run -m src.pipeline
    uv run -m src.pipeline --sources flickr --summary

    # Programmatic interface
    from src.pipeline import run_pipeline
    from src.sync import SyncConfig
    report = run_pipeline(SyncConfig.from_env())
"""

__version__ = "0.1.0"

from .build import BuildInvoker, ShellBuildInvoker
from .orchestrator import SyncOrchestrator, run_pipeline

__all__ = [
    "BuildInvoker",
    "ShellBuildInvoker",
    "SyncOrchestrator",
    "run_pipeline",
]
