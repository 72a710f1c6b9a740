from __future__ import annotations

from fastapi import FastAPI, File, UploadFile
from fastapi.responses import Response
from PIL import Image
import io

app = FastAPI(title="LookIT Mock Fitting Server")


@app.post("/fitting")
async def fitting(clothesImage: UploadFile = File(...), bodyImage: UploadFile = File(...)):
    body = Image.open(bodyImage.file).convert("RGB")
    clothes = Image.open(clothesImage.file).convert("RGBA")
    # Shrink the garment to fit, then centre it over the body
    w, h = body.size
    clothes.thumbnail((max(w * 2 // 3, 1), max(h * 2 // 3, 1)))
    gw, gh = clothes.size
    x = (w - gw) // 2; y = (h - gh) // 2
    out = body.copy(); out.paste(clothes, (x, y), clothes)
    buf = io.BytesIO(); out.save(buf, format="PNG")
    return Response(content=buf.getvalue(), media_type="image/png")
