import base64
import json

from ..core.pipeline import render_pattern_image


def export_json(pattern):
    pat = pattern.to_dict() if hasattr(pattern, "to_dict") else dict(pattern)
    preview = render_pattern_image(pat, with_codes=True)
    pat["preview_png"] = base64.b64encode(preview).decode()
    return json.dumps(pat, ensure_ascii=False, indent=2)
