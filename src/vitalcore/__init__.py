"""vitalcore: health scores, training load and run ledgers from daily metrics."""

__version__ = "0.1.0"
