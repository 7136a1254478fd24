"""Static topic catalog, loaded once from the bundled topics.json."""
import json
from functools import lru_cache
from pathlib import Path

from math_adventure.models import Category, Topic

CONTENT_DIR = Path(__file__).parent / "content"

DEFAULT_ICON = "❓"
ICONS = {
    "Calculator": "🧮",
    "Square": "⬜",
    "Calendar": "📅",
    "X": "✖️",
    "Box": "📦",
    "Trophy": "🏆",
}

CATEGORY_LABELS = {
    Category.CALCULATION: "计算",
    Category.GEOMETRY: "几何",
    Category.CONCEPT: "概念",
    Category.LOGIC: "逻辑",
}


def load_topics(path: Path = CONTENT_DIR / "topics.json") -> tuple[Topic, ...]:
    """Read topic descriptors from a catalog file. Ids must be unique."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    topics = []
    seen = set()
    for t in data["topics"]:
        if t["id"] in seen:
            raise ValueError(f"duplicate topic id: {t['id']}")
        seen.add(t["id"])
        topics.append(Topic(
            id=t["id"],
            title=t["title"],
            description=t["description"],
            visual_tag=t["visual_tag"],
            color_tag=t["color_tag"],
            category=Category(t["category"]),
        ))
    return tuple(topics)


@lru_cache(maxsize=1)
def get_topics() -> tuple[Topic, ...]:
    return load_topics()


def get_topic(topic_id: str) -> Topic | None:
    for topic in get_topics():
        if topic.id == topic_id:
            return topic
    return None


def find_topic(choice: str) -> Topic | None:
    """Resolve a dashboard choice: a 1-based position or a topic id."""
    choice = choice.strip()
    if choice.isdigit():
        index = int(choice) - 1
        topics = get_topics()
        return topics[index] if 0 <= index < len(topics) else None
    return get_topic(choice)


def icon_for(topic: Topic) -> str:
    return ICONS.get(topic.visual_tag, DEFAULT_ICON)
