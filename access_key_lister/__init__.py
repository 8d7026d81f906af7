"""List IAM access keys for every user across multiple AWS accounts."""

__version__ = "0.1.0"
