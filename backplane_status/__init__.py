"""Component status reporters, condition helpers and a status tracker for a multicluster engine."""

__version__ = "0.1.0"