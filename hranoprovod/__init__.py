"""Plain text diet and exercise tracker with nested recipes and custom elements."""

__version__ = "3.0.0"