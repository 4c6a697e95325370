"""Static site publishing for linkweave corpora."""

from .generator import PublishConfig, SiteGenerator, output_path_for

__all__ = ["PublishConfig", "SiteGenerator", "output_path_for"]
