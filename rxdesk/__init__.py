"""rxdesk: staged multi-item acquisition engine for clinic and lab forms."""

__version__ = "0.1.0"
