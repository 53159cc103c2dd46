"""fsdlint — feature-sliced design conformance linter."""

__version__ = "0.4.0"
