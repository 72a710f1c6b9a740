from __future__ import annotations

from PIL import Image, ImageDraw
import os


def ensure_dir(p: str) -> None:
    os.makedirs(p, exist_ok=True)


def create_body_image(path: str) -> None:
    w, h = 600, 900
    im = Image.new("RGB", (w, h), (230, 230, 230))
    d = ImageDraw.Draw(im)
    d.ellipse((w//2-70, 60, w//2+70, 200), fill=(200, 200, 200))  # head
    d.rectangle((w//2-60, 200, w//2+60, 620), fill=(180, 180, 180))  # torso
    d.rectangle((w//2-110, 620, w//2-30, 880), fill=(160, 160, 160))  # left leg
    d.rectangle((w//2+30, 620, w//2+110, 880), fill=(160, 160, 160))  # right leg
    d.text((20, 20), "body.png (placeholder)", fill=(50, 50, 50))
    im.save(path)


def create_clothes_image(path: str) -> None:
    w, h = 400, 400
    im = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    d = ImageDraw.Draw(im)
    color = (120, 160, 255, 230)
    d.rectangle((100, 100, 300, 340), fill=color)  # body
    d.polygon([(100, 100), (40, 190), (100, 190)], fill=color)  # left sleeve
    d.polygon([(300, 100), (360, 190), (300, 190)], fill=color)  # right sleeve
    im.save(path)


def main() -> None:
    ensure_dir("sample_data")
    for name, make in (("body.png", create_body_image), ("clothes.png", create_clothes_image)):
        path = os.path.join("sample_data", name)
        if os.path.exists(path):
            print(f"Exists {path}")
            continue
        make(path)
        print(f"Created {path}")


if __name__ == "__main__":
    main()
