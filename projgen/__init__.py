"""projgen -- generates disposable sample .NET projects for test harnesses."""

__version__ = "0.1.0"
