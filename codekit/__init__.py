"""codekit: install agents, skills and commands into .claude/ trees."""

__version__ = "0.3.0"
