"""ReelSub — bilingual one-line captions for short videos."""

__version__ = "0.1.0"
