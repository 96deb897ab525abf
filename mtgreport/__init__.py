"""Card collection tracking, price reconciliation and value reports for Magic: The Gathering."""

__version__ = "0.1.0"