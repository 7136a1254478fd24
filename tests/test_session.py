from math_adventure.catalog import get_topic
from math_adventure.chat import EXPLANATION_FALLBACK
from math_adventure.models import Difficulty, QuizState, ViewState
from math_adventure.session import Session
from conftest import FakeProvider


def test_new_session_starts_on_dashboard(session):
    assert session.view_state == ViewState.DASHBOARD
    assert session.current_topic is None
    assert session.lesson is None
    assert session.stats.total_questions == 0


def test_select_topic_enters_lesson(session, provider, topic):
    lesson = session.select_topic(topic)
    assert session.view_state == ViewState.LESSON
    assert session.current_topic == topic
    assert session.lesson is lesson
    assert [m.text for m in lesson.chat.messages] == ["讲解：混合运算"]
    assert lesson.quiz.state == QuizState.READY
    assert lesson.quiz.difficulty == Difficulty.EASY
    assert provider.explain_calls == [("混合运算", "")]
    assert provider.quiz_calls == [("混合运算", Difficulty.EASY)]


def test_select_topic_with_provider_down(topic, provider_error):
    provider = FakeProvider(explanations=[provider_error], quizzes=[provider_error])
    session = Session(provider)
    lesson = session.select_topic(topic)
    assert session.view_state == ViewState.LESSON
    assert [m.text for m in lesson.chat.messages] == [EXPLANATION_FALLBACK]
    assert lesson.quiz.state == QuizState.ERROR


def test_record_answer(session):
    session.record_answer(True)
    session.record_answer(False)
    assert session.stats.total_questions == 2
    assert session.stats.correct_answers == 1
    assert session.stats.stars == 1


def test_quiz_answers_flow_into_session_stats(session, topic):
    lesson = session.select_topic(topic)
    lesson.quiz.answer(0)
    assert session.stats.total_questions == 1
    assert session.stats.stars == 1


def test_return_to_dashboard_clears_lesson(session, topic):
    lesson = session.select_topic(topic)
    session.return_to_dashboard()
    assert session.view_state == ViewState.DASHBOARD
    assert session.current_topic is None
    assert session.lesson is None
    assert lesson.quiz.discarded


def test_stats_survive_return_to_dashboard(session, topic):
    session.select_topic(topic).quiz.answer(0)
    session.return_to_dashboard()
    assert session.stats.correct_answers == 1


def test_reentering_topic_has_fresh_chat(session, topic):
    lesson = session.select_topic(topic)
    lesson.chat.send("再讲一遍")
    assert len(lesson.chat.messages) == 3
    session.return_to_dashboard()
    lesson = session.select_topic(topic)
    assert len(lesson.chat.messages) == 1
    assert lesson.chat.messages[0].role == "model"


def test_reentering_topic_has_fresh_quiz(session, topic):
    lesson = session.select_topic(topic)
    lesson.quiz.answer(0)
    lesson.quiz.advance()
    lesson.quiz.set_difficulty(Difficulty.HARD)
    session.return_to_dashboard()
    lesson = session.select_topic(topic)
    assert lesson.quiz.difficulty == Difficulty.EASY
    assert lesson.quiz.progress == (1, 3)
    assert lesson.quiz.streak == 0


def test_stale_explanation_is_dropped(session, topic):
    old = session.select_topic(topic)
    session.return_to_dashboard()
    assert session.deliver_explanation(old.generation, "迟到的讲解") is False
    new = session.select_topic(get_topic("perimeter"))
    assert session.deliver_explanation(old.generation, "迟到的讲解") is False
    assert [m.text for m in new.chat.messages] == ["讲解：周长"]


def test_generations_increase(session, topic):
    first = session.select_topic(topic)
    second = session.select_topic(get_topic("calendar"))
    assert second.generation > first.generation
    assert first.quiz.discarded
    assert session.current_topic.id == "calendar"


def test_ask_forwards_to_chat(session, topic, provider):
    session.select_topic(topic)
    reply = session.ask("括号先算吗？")
    assert reply.text == "回答：括号先算吗？"
    assert provider.chat_calls[-1][1] == "括号先算吗？"


def test_ask_on_dashboard_is_ignored(session, provider):
    assert session.ask("你好") is None
    assert provider.chat_calls == []
