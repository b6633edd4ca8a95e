"""Local-network chat server: JSON messages over length-prefixed TCP, with UDP discovery."""

__version__ = "0.1.0"