import json
import re
from pathlib import Path
from typing import Any, Dict

from PIL import Image, ImageDraw


def safe_filename(text: str, default: str = "roster") -> str:
    text = re.sub(r"[^a-zA-Z0-9_\-]+", "_", text.strip()).strip("_")
    return text.lower() or default


def ensure_folder(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_json(path: Path) -> Dict[str, Any]:
    # utf-8-sig tolerates catalogs saved with a BOM
    return json.loads(path.read_text(encoding="utf-8-sig"))


def parse_json(text: str) -> Dict[str, Any]:
    return json.loads(text.lstrip("\ufeff"))


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_app_icon(path: Path, size: int = 64) -> Image.Image:
    """
    Opens the icon at path, or draws a plain leaf badge when no icon file ships.
    """
    if path.exists():
        return Image.open(path)
    icon = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(icon)
    draw.ellipse((2, 2, size - 3, size - 3), fill=(120, 53, 15, 255))
    m = size // 4
    draw.ellipse((m, m + 4, size - m, size - m - 4), fill=(234, 138, 36, 255))
    draw.line((m, size - m, size - m, m), fill=(120, 53, 15, 255), width=max(1, size // 16))
    return icon
