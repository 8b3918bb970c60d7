"""mindspace — ideas as planets, linked across galaxy and solar layouts."""

__version__ = "0.1.0"
