"""Dashboard scoring and the text-mode stats chart."""
from math_adventure.models import UserStats

BAR_WIDTH = 20


def get_accuracy(stats: UserStats) -> float:
    if stats.total_questions == 0:
        return 0.0
    return round(stats.correct_answers / stats.total_questions * 100, 1)


def get_accuracy_label(score: float) -> str:
    if score >= 90:
        return "数学小达人"
    elif score >= 70:
        return "表现不错"
    elif score >= 50:
        return "继续加油"
    return "多多练习"


def get_accuracy_color(score: float) -> str:
    if score >= 90:
        return "green"
    elif score >= 70:
        return "yellow"
    elif score >= 50:
        return "dark_orange"
    return "red"


def get_chart_rows(stats: UserStats) -> list[dict]:
    return [
        {"name": "已做题数", "value": stats.total_questions, "color": "medium_purple1"},
        {"name": "答对题数", "value": stats.correct_answers, "color": "green"},
    ]


def render_bar(value: int, maximum: int, width: int = BAR_WIDTH) -> str:
    """Proportional block bar; the largest row fills the whole width."""
    if maximum <= 0:
        return "░" * width
    filled = round(value / maximum * width)
    return "█" * filled + "░" * (width - filled)


def get_streak_badge(streak: int) -> str:
    return f"⭐ {streak} 连对!" if streak > 1 else ""
