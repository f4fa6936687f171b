"""
Avatar style catalog.

This is the fixed menu the wizard offers. The generation endpoint does not
enforce it: any non-empty style label is accepted, and labels that match a
menu entry are rendered with the entry's display name in prompts.
"""
from typing import Dict, List, Optional


AVATAR_STYLES: List[Dict[str, str]] = [
    {"id": "3d", "name": "3D Render", "description": "Modern 3D rendered character style"},
    {"id": "anime", "name": "Anime", "description": "Japanese anime-inspired style"},
    {"id": "cartoon", "name": "Cartoon", "description": "Fun and colorful cartoon style"},
    {"id": "sketch", "name": "Sketch", "description": "Hand-drawn pencil sketch style"},
    {"id": "oil", "name": "Oil Painting", "description": "Classical oil painting style"},
    {"id": "watercolor", "name": "Watercolor", "description": "Soft watercolor painting style"},
    {"id": "pixel", "name": "Pixel Art", "description": "Retro pixel art style"},
    {"id": "cyberpunk", "name": "Cyberpunk", "description": "Futuristic cyberpunk style"},
    {"id": "lowpoly", "name": "Low Poly", "description": "Geometric low polygon style"},
]


def list_styles() -> List[Dict[str, str]]:
    """Return a copy of the style menu."""
    return [dict(s) for s in AVATAR_STYLES]


def get_style(style_id: str) -> Optional[Dict[str, str]]:
    """Look up a menu entry by id (case-insensitive)."""
    key = (style_id or "").strip().lower()
    for s in AVATAR_STYLES:
        if s["id"] == key:
            return dict(s)
    return None


def style_display_name(style: str) -> str:
    """Display name for a menu style, or the label itself for free-form styles."""
    entry = get_style(style)
    return entry["name"] if entry else style.strip()
