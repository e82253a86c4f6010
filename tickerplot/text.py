from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

RGBA = tuple[int, int, int, int]

DEFAULT_FONT_FAMILY = "DejaVu Sans"
FONT_FALLBACK_PATTERNS = (
    "dejavusans",
    "dejavu sans",
    "liberationsans",
    "helvetica",
    "arial",
    "dejavusansmono",
    "menlo",
    "courier",
)
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)


@dataclass(frozen=True)
class Font:
    family: str = DEFAULT_FONT_FAMILY
    size_px: float = 10.0


def text_size(text: str, font: Font, rotate_deg: int = 0) -> tuple[int, int]:
    """Pixel footprint of `text`; quarter-turn rotations swap width and height."""
    pil_font = _load_font(font.family, font.size_px)
    if not text:
        ascent, descent = pil_font.getmetrics() if hasattr(pil_font, "getmetrics") else (font.size_px, 0)
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = pil_font.getbbox(text)
    w = max(0, int(right - left))
    h = max(1, int(bottom - top))
    if _quarter_turns(rotate_deg) % 2 == 1:
        return (h, w)
    return (w, h)


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    font: Font,
    *,
    rotate_deg: int = 0,
) -> None:
    """Blend `text` with its top-left corner at (x, y)."""
    if not text:
        return
    mask = _render_mask(text, _load_font(font.family, font.size_px))
    turns = _quarter_turns(rotate_deg)
    if turns:
        mask = np.rot90(mask, k=turns)
    _blend_mask(dst, x, y, mask, color)


def _blend_mask(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    h, w = mask.shape
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return
    cov = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    alpha = (color[3] / 255.0) * cov
    if not np.any(alpha > 0):
        return
    patch = dst[y0:y1, x0:x1]
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    out = src_rgb * alpha[:, :, None] + patch[:, :, :3].astype(np.float32) * (1.0 - alpha[:, :, None])
    patch[:, :, :3] = np.clip(out, 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.maximum(patch[:, :, 3], np.clip(alpha * 255.0, 0, 255).astype(np.uint8))


@lru_cache(maxsize=256)
def _render_mask(text: str, pil_font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> np.ndarray:
    left, top, right, bottom = pil_font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=pil_font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=64)
def _load_font(family: str, size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(size_px)))
    path = _resolve_font_path(family)
    if path is not None:
        try:
            return ImageFont.truetype(str(path), size=size)
        except OSError:
            pass
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=16)
def _resolve_font_path(family: str) -> Path | None:
    wanted = family.strip().lower() or DEFAULT_FONT_FAMILY.lower()
    candidates: list[Path] = []
    for base in FONT_DIRS:
        if base.exists():
            for ext in ("*.ttf", "*.otf", "*.ttc"):
                candidates.extend(base.rglob(ext))
    for pattern in (wanted,) + FONT_FALLBACK_PATTERNS:
        p = pattern.replace(" ", "")
        for path in candidates:
            if p == path.stem.lower().replace(" ", "").replace("-", ""):
                return path
        for path in candidates:
            if p in path.stem.lower().replace(" ", ""):
                return path
    return None


def _quarter_turns(rotate_deg: int) -> int:
    if rotate_deg % 90 != 0:
        raise ValueError("rotate_deg must be a multiple of 90")
    return (rotate_deg // 90) % 4
