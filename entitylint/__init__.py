"""Static validation of Doctrine ORM mapping declarations in PHP sources."""

__version__ = "0.1.0"
