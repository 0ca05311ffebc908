"""
Eye icon for the tray and the app bundle, drawn with Pillow.
Run standalone to write icon.ico / icon.png, or call create_eye_icon().
"""
from __future__ import annotations
import math

from PIL import Image, ImageDraw

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)
GRAY = (120, 128, 128, 255)
LIGHT_GRAY = (170, 176, 176, 255)


def _hex_rgba(color: str, alpha: int = 255) -> tuple[int, int, int, int]:
    color = color.lstrip("#")
    return (int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16), alpha)


def _lens_points(cx: float, cy: float, half_w: float, half_h: float, steps: int = 48) -> list:
    """Outline of an almond-shaped eye (two arcs meeting at the corners)."""
    top, bottom = [], []
    for i in range(steps + 1):
        t = -1 + 2 * i / steps
        x = cx + t * half_w
        dy = half_h * math.cos(t * math.pi / 2)
        top.append((x, cy - dy))
        bottom.append((x, cy + dy))
    return top + bottom[::-1]


def create_eye_icon(size: int = 64, accent: str = "#ef4444", enabled: bool = True) -> Image.Image:
    """Eye inside a coloured frame. Greyed out when reminders are off."""
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    s = size / 64  # designed at 64px
    w = max(1, int(2 * s))

    frame = _hex_rgba(accent) if enabled else GRAY
    iris = _hex_rgba(accent) if enabled else LIGHT_GRAY

    # Screen border (the cue the app draws around the monitor)
    m = int(4 * s)
    draw.rounded_rectangle([m, m, size - m - 1, size - m - 1], radius=int(8 * s),
                           outline=frame, width=max(2, int(5 * s)))

    # Eye white + outline
    cx, cy = size / 2, size / 2
    pts = _lens_points(cx, cy, 20 * s, 12 * s)
    draw.polygon(pts, fill=WHITE)
    draw.line(pts + [pts[0]], fill=BLACK, width=w)

    # Iris, pupil, highlight
    r_iris = 8 * s
    draw.ellipse([cx - r_iris, cy - r_iris, cx + r_iris, cy + r_iris], fill=iris, outline=BLACK, width=w)
    r_pupil = 3.5 * s
    draw.ellipse([cx - r_pupil, cy - r_pupil, cx + r_pupil, cy + r_pupil], fill=BLACK)
    hr = max(1, 1.5 * s)
    draw.ellipse([cx + 2 * s - hr, cy - 3 * s - hr, cx + 2 * s + hr, cy - 3 * s + hr], fill=WHITE)

    return img


def generate_icon(accent: str = "#ef4444") -> None:
    """Write icon.ico and icon.png to the current directory."""
    sizes = [16, 32, 48, 64, 128, 256]
    images = [create_eye_icon(sz, accent) for sz in sizes]
    # ICO: save largest first, append smaller; PIL requires this order
    images[-1].save("icon.ico", format="ICO", append_images=images[:-1])
    images[-1].save("icon.png", format="PNG")


if __name__ == "__main__":
    generate_icon()
    create_eye_icon(512).save("icon_preview.png", format="PNG")
    print("Generated icon.ico, icon.png, and icon_preview.png (512px)")
