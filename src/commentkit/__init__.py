"""commentkit — doc comment resolution for JavaScript and TypeScript trees."""

__version__ = "0.1.0"
