from adaptiq.engine import AdaptiveQuiz
from adaptiq.keys import KeyboardAdapter
from adaptiq.models import QuizPhase


def test_digit_selects_and_enter_submits(bank, clock):
    quiz = AdaptiveQuiz(bank, clock=clock)
    keys = KeyboardAdapter(quiz)

    assert keys.handle_key("3") == "select"
    assert quiz.selected_option == 2
    assert keys.handle_key("Enter") == "submit"
    assert quiz.phase == QuizPhase.REVEALED
    assert quiz.answers[0].selected_answer == 2


def test_repeating_selected_digit_submits(bank, clock):
    quiz = AdaptiveQuiz(bank, clock=clock)
    keys = KeyboardAdapter(quiz)

    keys.handle_key("1")
    assert keys.handle_key("1") == "submit"
    assert quiz.answers[0].is_correct


def test_enter_without_selection_does_nothing(bank, clock):
    quiz = AdaptiveQuiz(bank, clock=clock)
    assert KeyboardAdapter(quiz).handle_key("Enter") is None
    assert quiz.answers == []


def test_unknown_keys_and_revealed_phase_are_ignored(bank, clock):
    quiz = AdaptiveQuiz(bank, clock=clock)
    keys = KeyboardAdapter(quiz)

    assert keys.handle_key("x") is None
    assert keys.handle_key("5") is None
    keys.handle_key("2")
    keys.handle_key("Enter")
    assert keys.handle_key("1") is None
    assert quiz.selected_option == 1
