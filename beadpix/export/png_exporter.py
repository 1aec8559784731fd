from ..core.pipeline import render_preview


def export_png(pattern, zoom: float = 1):
    return render_preview(pattern, zoom=zoom)
