import base64
import os


class Fixtures:
    def __init__(self, base_path: str):
        self.base_path = base_path

    def path(self, fixture: str) -> str:
        return os.path.join(
            os.path.dirname(__file__), "fixtures", self.base_path, fixture
        )

    def get(self, fixture: str) -> str:
        with open(self.path(fixture), encoding="utf-8") as f:
            return f.read().strip()

    def get_base64(self, fixture: str) -> str:
        """The fixture encoded the way platforms return file contents."""
        return base64.b64encode(self.get(fixture).encode()).decode()
