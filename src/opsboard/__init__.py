"""Operations dashboard API: fuel telemetry, call-center KPIs and phonebook exports."""

__version__ = "0.1.0"
