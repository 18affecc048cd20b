"""LeadScout Hunter - discover, score and rank sales leads from seed websites."""

__version__ = "0.1.0"
