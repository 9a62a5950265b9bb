"""File utilities."""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Dict

PNG_SIGNATURE = b"\x89PNG"


def ensure_dir(path: str) -> Path:
    """Ensure directory exists and return Path."""
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def read_text_file(path: str) -> str:
    return Path(path).read_text(encoding="utf-8", errors="ignore")


def load_json(path: str) -> dict:
    return json.loads(read_text_file(path))


def safe_file_stem(name: str) -> str:
    """Layer name with every non-alphanumeric character replaced by `_`."""
    return re.sub(r"[^a-zA-Z0-9]", "_", name)


def load_layer_images(directory: str) -> Dict[str, bytes]:
    """Read `<asset id>.png` files from ``directory`` into {asset_id: bytes}.

    Asset ids often contain `:`; files may spell it as `_` or `-` instead, so the
    raw stem is returned and callers match it with ``match_layer_images``.
    """
    images: Dict[str, bytes] = {}
    root = Path(directory)
    if not root.is_dir():
        return images
    for path in sorted(root.glob("*.png")):
        data = path.read_bytes()
        if data.startswith(PNG_SIGNATURE):
            images[path.stem] = data
    return images


def match_layer_images(images: Dict[str, bytes], asset_ids) -> Dict[str, bytes]:
    """Key ``images`` by asset id, accepting `:` spelled as `_` or `-` in file names."""
    matched: Dict[str, bytes] = {}
    for asset_id in asset_ids:
        for candidate in (asset_id, asset_id.replace(":", "_"), asset_id.replace(":", "-")):
            if candidate in images:
                matched[asset_id] = images[candidate]
                break
    return matched


def write_bytes(path: Path, data: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path
