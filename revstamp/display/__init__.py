"""Display normalization for tags and branches."""

from revstamp.display.normalizer import DisplayState, normalize, prettify_branch, prettify_tag

__all__ = ["DisplayState", "normalize", "prettify_branch", "prettify_tag"]
