"""iolauncher - provision and start an io.net worker container."""

__version__ = "0.1.0"
