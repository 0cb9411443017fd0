import yaml
from pathlib import Path

FEEDBACK_PATH = Path(__file__).parent / "feedback.yaml"


def load_feedback(path=FEEDBACK_PATH):
    with open(path, "r") as f:
        return yaml.safe_load(f)


class FeedbackCatalog:
    """
    Section-scoped view of feedback.yaml.

    Loaded once per validator; a missing key fails at construction time
    instead of on the first bad frame.
    """

    def __init__(self, section, required=(), path=FEEDBACK_PATH):
        data = load_feedback(path)
        self.common = data["common"]
        self.messages = data[section]
        missing = [k for k in required if k not in self.messages]
        if missing:
            raise KeyError(f"feedback.yaml [{section}] missing: {', '.join(missing)}")

    def get(self, key, **values):
        text = self.messages[key]
        return text.format(**values) if values else text

    def common_text(self, key):
        return self.common[key]
