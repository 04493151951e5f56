"""CareTrek backend.

Persistence core for seniors, the family members who follow them, and the
links between the two, plus the process bootstrap that serves it.
"""

__version__ = "0.1.0"
