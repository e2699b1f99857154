"""Redis command console: batch execution with redis-cli style rendering."""

__version__ = "0.1.0"
