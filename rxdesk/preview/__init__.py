from rxdesk.preview.render import render_prescription_preview

__all__ = ["render_prescription_preview"]
