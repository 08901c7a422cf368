"""Station software building blocks for a software-defined HF transceiver: filters, logbook, FT8 markup, WSJT-X decodes, macros and settings."""

__version__ = "0.1.0"

__all__ = [
    "fft_filter",
    "hist_disp",
    "ini",
    "logbook",
    "logbook_export",
    "macros",
    "records",
    "resampler",
    "wsjtx",
]