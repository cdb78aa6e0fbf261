"""new-go-server: generate a Go backend project skeleton from built-in templates."""

__version__ = "0.1.0"
