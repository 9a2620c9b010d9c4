"""SmartSpend: personal finance tracking with spending trends and savings advice."""

__version__ = "0.1.0"
