"""clean-code - GrumPHP configuration generator for Drupal projects."""

__version__ = "1.0.0"
