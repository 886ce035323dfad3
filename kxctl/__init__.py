"""Run kubectl commands across Kubernetes contexts selected by name patterns."""

__version__ = "0.1.0"
__all__ = ["__version__"]