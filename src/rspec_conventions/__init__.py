"""Static convention checker for RSpec suites."""

__version__ = "0.3.0"
