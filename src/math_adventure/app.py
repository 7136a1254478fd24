"""Interactive CLI application."""
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from math_adventure.catalog import CATEGORY_LABELS, find_topic, get_topics, icon_for
from math_adventure.config import load_settings
from math_adventure.dashboard import (
    get_accuracy, get_accuracy_color, get_accuracy_label, get_chart_rows,
    get_streak_badge, render_bar,
)
from math_adventure.gemini import GeminiClient
from math_adventure.models import Difficulty, QuizState
from math_adventure.session import LessonState, Session

console = Console()

OPTION_KEYS = ["a", "b", "c", "d"]
EXIT_WORDS = ("q", "menu", "back")


class SessionExitRequested(Exception):
    """Raised when the learner asks to leave the lesson."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def show_welcome(session: Session):
    console.print(Panel(
        "[bold]欢迎回来, 小小数学家! 👋[/bold]\n[dim]今天我们要探索哪颗数学星球呢？[/dim]",
        title="深圳三年级数学探险", subtitle=f"⭐ {session.stats.stars} 星星", border_style="blue",
    ))


def show_stats(session: Session):
    stats = session.stats
    rows = get_chart_rows(stats)
    top = max(r["value"] for r in rows)
    lines = []
    for r in rows:
        bar = render_bar(r["value"], top)
        lines.append(f"{r['name']:<6} [{r['color']}]{bar}[/{r['color']}] {r['value']}")
    score = get_accuracy(stats)
    color = get_accuracy_color(score)
    lines.append(f"\n正确率: [bold]{score}%[/bold] [{color}]{get_accuracy_label(score)}[/{color}]")
    console.print(Panel("\n".join(lines), title="学习战绩", border_style="cyan"))


def show_topics():
    table = Table(title="数学星球")
    table.add_column("#", justify="right")
    table.add_column("")
    table.add_column("主题", style="bold")
    table.add_column("类别")
    table.add_column("介绍", style="dim")
    for i, topic in enumerate(get_topics(), 1):
        table.add_row(
            str(i),
            icon_for(topic),
            f"[{topic.color_tag}]{topic.title}[/{topic.color_tag}]",
            CATEGORY_LABELS[topic.category],
            topic.description,
        )
    console.print(table)


def show_chat(lesson: LessonState):
    for msg in lesson.chat.messages:
        if msg.role == "user":
            console.print(Panel(escape(msg.text), title="你", title_align="right", border_style="blue"))
        else:
            console.print(Panel(escape(msg.text), title="🤖 AI 数学老师", title_align="left", border_style="green"))


def show_quiz(lesson: LessonState):
    quiz = lesson.quiz
    tiers = "  ".join(
        f"[reverse bold] {d.label} [/reverse bold]" if d == quiz.difficulty else f"[dim]{d.label}[/dim]"
        for d in Difficulty
    )
    console.print(f"\n[bold]🏆 闯关挑战[/bold]   {tiers}")

    if quiz.state == QuizState.ERROR:
        console.print("[red]哎呀，生成题目失败了，请重试。[/red] [dim](输入 retry)[/dim]")
        return
    question = quiz.current
    if question is None:
        console.print("[dim]正在生成题目...[/dim]")
        return

    position, total = quiz.progress
    console.print(f"[yellow]{render_bar(position, total)}[/yellow] {position}/{total}")
    badge = get_streak_badge(quiz.streak)
    console.print(f"[bold cyan]第 {position} 题[/bold cyan]  [bold dark_orange]{badge}[/bold dark_orange]")
    console.print(f"\n[bold]{escape(question.question)}[/bold]\n")

    answered = quiz.state == QuizState.ANSWERED
    for idx, option in enumerate(question.options):
        mark = ""
        style = "cyan"
        if answered and idx == question.correct_answer:
            mark, style = " ✅", "green"
        elif answered and idx == quiz.selected:
            mark, style = " ❌", "red"
        console.print(f"  [{style}]{OPTION_KEYS[idx]})[/{style}] {escape(option)}{mark}")

    if answered:
        console.print(Panel(escape(question.explanation or "..."), title="🤖 老师解析", border_style="blue"))
        label = "完成本轮" if quiz.is_last_question else "下一题"
        console.print(f"[dim]输入 next → {label}[/dim]")


def show_lesson(lesson: LessonState):
    topic = lesson.topic
    console.rule(f"{icon_for(topic)} [bold {topic.color_tag}]{topic.title}[/bold {topic.color_tag}]")
    show_chat(lesson)
    show_quiz(lesson)
    console.print(
        "\n[dim]命令: a-d 作答 | next 下一题 | ask 提问 | level 1-3 难度 | retry 重试 | back 返回[/dim]"
    )


def cmd_answer(lesson: LessonState, key: str):
    result = lesson.quiz.answer(OPTION_KEYS.index(key))
    if result is None:
        state = lesson.quiz.state
        if state == QuizState.ANSWERED:
            console.print("[dim]这道题已经答过了，输入 next 继续。[/dim]")
        elif state == QuizState.ERROR:
            console.print("[dim]还没有题目，输入 retry 重新生成。[/dim]")
        else:
            console.print("[dim]题目还在生成中，请稍等。[/dim]")
    elif result.is_correct:
        console.print("[green]答对了! +1 ⭐[/green]")
    else:
        correct = OPTION_KEYS[result.correct_answer]
        console.print(f"[red]答错了.[/red] 正确答案: [green]{correct}[/green]")


def cmd_next(lesson: LessonState):
    if lesson.quiz.state != QuizState.ANSWERED:
        console.print("[dim]先选一个答案吧。[/dim]")
        return
    if lesson.quiz.is_last_question:
        with console.status("正在生成题目..."):
            lesson.quiz.advance()
    else:
        lesson.quiz.advance()


def cmd_ask(lesson: LessonState):
    text = session_prompt("[bold]我不明白，请再讲讲...[/bold]")
    if not text.strip():
        return
    with console.status("老师正在思考..."):
        lesson.chat.send(text)


def cmd_level(lesson: LessonState, arg: str):
    tiers = list(Difficulty)
    if not arg:
        for i, d in enumerate(tiers, 1):
            console.print(f"  [cyan]{i}[/cyan]) {d.label} [dim]{d.description}[/dim]")
        arg = session_prompt("选择难度", choices=[str(i) for i in range(1, len(tiers) + 1)])
    if not arg.isdigit() or not 1 <= int(arg) <= len(tiers):
        console.print("[red]难度只能是 1-3。[/red]")
        return
    with console.status("正在生成题目..."):
        lesson.quiz.set_difficulty(tiers[int(arg) - 1])


def cmd_retry(lesson: LessonState):
    if lesson.quiz.state != QuizState.ERROR:
        return
    with console.status("正在生成题目..."):
        lesson.quiz.retry()


def handle_lesson_command(lesson: LessonState, command: str):
    parts = command.strip().lower().split(maxsplit=1)
    if not parts:
        return
    name, arg = parts[0], parts[1] if len(parts) > 1 else ""
    if name in OPTION_KEYS:
        cmd_answer(lesson, name)
    elif name in ("next", "n"):
        cmd_next(lesson)
    elif name == "ask":
        cmd_ask(lesson)
    elif name == "level":
        cmd_level(lesson, arg)
    elif name == "retry":
        cmd_retry(lesson)
    else:
        console.print("[red]Unknown command. Try again.[/red]")


def run_lesson(session: Session, topic):
    with console.status("[bold]正在前往数学星球...[/bold]"):
        lesson = session.select_topic(topic)
    try:
        while True:
            show_lesson(lesson)
            command = session_prompt("\n[bold]>[/bold]")
            handle_lesson_command(lesson, command)
    except SessionExitRequested:
        session.return_to_dashboard()


def setup_logging(level: str):
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    settings = load_settings()
    setup_logging(settings.log_level)
    session = Session(GeminiClient(settings))
    if not settings.ai_enabled:
        console.print("[yellow]GEMINI_API_KEY 未设置，AI 老师暂时无法回答。[/yellow]")

    while True:
        show_welcome(session)
        show_stats(session)
        show_topics()
        choice = Prompt.ask("\n选择星球 (编号) 或 quit", default="1").strip().lower()
        try:
            if choice in ("quit", "exit", "q"):
                console.print("[dim]下次再见! 🚀[/dim]")
                break
            topic = find_topic(choice)
            if topic is None:
                console.print("[red]Unknown command. Try again.[/red]")
                continue
            run_lesson(session, topic)
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
            session.return_to_dashboard()
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")
            session.return_to_dashboard()


if __name__ == "__main__":
    main()
