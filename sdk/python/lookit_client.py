import os
import time
import requests
from typing import Optional


class LookitClient:
    def __init__(self, base_url: str = "http://127.0.0.1:8000", user_id: int = 1, api_key: Optional[str] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers = {"X-User-Id": str(user_id)}
        if api_key:
            self.headers["x-api-key"] = api_key

    def request_fitting(self, clothes_path: str, body_path: str) -> str:
        url = f"{self.base_url}/v1/fittings"
        with open(clothes_path, "rb") as clothes, open(body_path, "rb") as body:
            files = {
                "clothesImage": (os.path.basename(clothes_path), clothes, "image/png"),
                "bodyImage": (os.path.basename(body_path), body, "image/png"),
            }
            r = requests.post(url, files=files, headers=self.headers, timeout=60)
        r.raise_for_status()
        return r.json()["task_id"]

    def list_results(self) -> list:
        r = requests.get(f"{self.base_url}/v1/fittings", headers=self.headers, timeout=30)
        r.raise_for_status()
        return r.json()

    def upload_image(self, path: str, content_type: str = "image/png") -> str:
        with open(path, "rb") as f:
            files = {"file": (os.path.basename(path), f, content_type)}
            r = requests.post(f"{self.base_url}/v1/images", files=files, headers=self.headers, timeout=60)
        r.raise_for_status()
        return r.json()["url"]

    def wait_for_results(self, count: int, timeout_s: int = 120, interval_s: float = 1.0) -> list:
        """Poll until at least ``count`` results exist. There is no task status, so this is the only signal."""
        deadline = time.time() + timeout_s
        last: list = []
        while time.time() < deadline:
            last = self.list_results()
            if len(last) >= count:
                return last
            time.sleep(interval_s)
        return last
