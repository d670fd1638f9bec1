"""Discovery services built on top of the providers."""
