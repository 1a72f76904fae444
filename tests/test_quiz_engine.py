import random
import threading

from corpus import build_catalog
from quiz_engine import EMPTY_POOL, LISTEN_PROMPT, MAX_MISTAKES, NO_SESSION, OK, QuizEngine
from helpers import make_engine


def test_start_singleton_pool_then_exact_match() -> None:
    engine = make_engine("saya suka makan")
    reply = engine.start("easy", "u1")
    assert reply.status == OK
    assert reply.audio == "clip0.mp3"
    assert reply.texts == [LISTEN_PROMPT]
    assert engine.active_item.sentence == "saya suka makan"

    result = engine.submit("u1", "Saya, suka makan!")
    assert result.status == OK
    assert result.text.startswith("Correct!")
    assert engine.active_item is None


def test_start_orders_audio_before_prompt() -> None:
    engine = make_engine("saya suka makan")
    kinds = [kind for kind, _ in engine.start("all", "u1").parts]
    assert kinds == ["audio", "text"]


def test_start_empty_pool_changes_nothing() -> None:
    engine = make_engine("saya suka makan")
    reply = engine.start("hard", "u1")
    assert reply.status == EMPTY_POOL
    assert reply.text == "No items loaded for level: hard"
    assert engine.active_item is None

    engine.start("easy", "u1")
    active = engine.active_item
    assert engine.start("expert", "u1").status == EMPTY_POOL
    assert engine.active_item is active


def test_start_on_empty_catalog() -> None:
    engine = QuizEngine(build_catalog([]))
    assert engine.start(None, "u1").status == EMPTY_POOL


def test_start_while_awaiting_surfaces_previous_answer_first() -> None:
    engine = make_engine("saya suka makan", "dia pergi ke pasar")
    engine.start("all", "u1")
    previous = engine.active_item.sentence

    reply = engine.start("all", "u2")
    assert reply.parts[0] == ("text", f"The previous item was unresolved. The answer was: {previous}")
    assert reply.audio is not None
    assert engine.active_item is not None


def test_start_selection_is_reproducible_with_seed() -> None:
    sentences = [f"kalimat nomor {i}" for i in range(20)]
    first = make_engine(*sentences, seed=7)
    second = make_engine(*sentences, seed=7)
    for _ in range(5):
        first.start("all", "u")
        second.start("all", "u")
        assert first.active_item == second.active_item


def test_partial_overlap_reports_remaining_attempts() -> None:
    engine = make_engine("saya pergi ke sekolah")
    engine.start("easy", "u1")
    reply = engine.submit("u1", "saya ke mana")
    assert reply.text == "Matched words: saya, ke\nStill incorrect. Attempts left: 2"
    assert engine.progress.mistakes("u1") == 1
    assert engine.active_item is not None


def test_no_overlap_reports_plain_incorrect() -> None:
    engine = make_engine("saya pergi ke sekolah")
    engine.start("easy", "u1")
    assert engine.submit("u1", "halo dunia").text == "Incorrect. Attempts left: 2"


def test_third_mistake_reveals_and_resets_exactly_then() -> None:
    engine = make_engine("saya pergi ke sekolah")
    engine.start("easy", "u1")
    for attempt in range(1, MAX_MISTAKES):
        engine.submit("u1", "salah")
        assert engine.progress.mistakes("u1") == attempt
        assert engine.active_item is not None

    reply = engine.submit("u1", "saya salah")
    assert "The answer was: saya pergi ke sekolah" in reply.text
    assert reply.text.startswith("Matched words: saya")
    assert engine.progress.mistakes("u1") == 0
    assert engine.active_item is None


def test_mistakes_are_tracked_per_user() -> None:
    engine = make_engine("saya pergi ke sekolah")
    engine.start("easy", "u1")
    engine.submit("u1", "salah")
    engine.submit("u1", "salah")
    engine.submit("u2", "salah")
    assert engine.progress.mistakes("u1") == 2
    assert engine.progress.mistakes("u2") == 1
    assert engine.active_item is not None


def test_mistakes_survive_a_new_session() -> None:
    engine = make_engine("saya pergi ke sekolah")
    engine.start("easy", "u1")
    engine.submit("u1", "salah")
    engine.start("easy", "u1")
    assert engine.progress.mistakes("u1") == 1


def test_correct_answer_resets_mistakes() -> None:
    engine = make_engine("saya pergi ke sekolah")
    engine.start("easy", "u1")
    engine.submit("u1", "salah")
    engine.submit("u1", "saya pergi ke sekolah.")
    assert engine.progress.mistakes("u1") == 0


def test_hint_ladder_through_engine() -> None:
    engine = make_engine("saya pergi ke sekolah")
    engine.start("easy", "u1")
    assert engine.hint("u1").text == "Word count: 4"
    for _ in range(3):
        engine.hint("u1")
    assert engine.hint("u1").text == "First 1 word(s): saya p____ k_ s______"
    assert engine.progress.hint_level("u1") == 5
    assert engine.active_item is not None


def test_hint_ladder_exhaustion_closes_session() -> None:
    engine = make_engine("saya pergi ke sekolah")
    engine.start("easy", "u1")
    replies = [engine.hint("u1") for _ in range(8)]
    assert "Answer: saya pergi ke sekolah" in replies[-1].text
    assert engine.active_item is None
    assert engine.progress.hint_level("u1") == 8


def test_start_resets_only_the_callers_hint_level() -> None:
    engine = make_engine("saya pergi ke sekolah")
    engine.start("easy", "u1")
    engine.hint("u1")
    engine.hint("u2")
    engine.start("easy", "u1")
    assert engine.progress.hint_level("u1") == 0
    assert engine.progress.hint_level("u2") == 1


def test_scheduled_start_without_user_keeps_hint_levels() -> None:
    engine = make_engine("saya pergi ke sekolah")
    engine.start("easy", "u1")
    engine.hint("u1")
    engine.start()
    assert engine.progress.hint_level("u1") == 1


def test_reveal_resets_counters_and_clears() -> None:
    engine = make_engine("saya pergi ke sekolah")
    engine.start("easy", "u1")
    engine.submit("u1", "salah")
    engine.hint("u1")
    reply = engine.reveal("u1")
    assert reply.text == "Answer: saya pergi ke sekolah"
    assert engine.progress.mistakes("u1") == 0
    assert engine.progress.hint_level("u1") == 0
    assert engine.active_item is None


def test_idle_requests_report_no_session() -> None:
    engine = make_engine("saya pergi ke sekolah")
    for reply in (engine.submit("u1", "saya"), engine.hint("u1"), engine.reveal("u1")):
        assert reply.status == NO_SESSION
    assert engine.progress.mistakes("u1") == 0
    assert engine.progress.hint_level("u1") == 0


def test_word_info_appended_when_glossary_loaded() -> None:
    engine = make_engine("saya suka makan", glossary={"makan": ("eat", "santap")})
    engine.start("easy", "u1")
    text = engine.reveal("u1").text
    assert text.startswith("Answer: saya suka makan\n\nWord info:\n")
    assert "makan: eat (santap)" in text
    assert "saya: unknown (none)" in text


def test_concurrent_correct_answers_succeed_once() -> None:
    engine = make_engine("saya suka makan", seed=1)
    engine.start("easy", "u0")
    barrier = threading.Barrier(8)
    results = []

    def answer(user: str) -> None:
        barrier.wait()
        results.append(engine.submit(user, "saya suka makan"))

    threads = [threading.Thread(target=answer, args=(f"u{i}",)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(1 for r in results if r.status == OK) == 1
    assert sum(1 for r in results if r.status == NO_SESSION) == 7
    assert engine.active_item is None


def test_rng_defaults_to_random_instance() -> None:
    engine = QuizEngine(build_catalog([]))
    assert isinstance(engine.rng, random.Random)


def test_empty_pool_does_not_reveal_active_answer() -> None:
    engine = make_engine("saya suka makan")
    engine.start("easy", "u1")
    reply = engine.start("hard", "u1")
    assert reply.texts == ["No items loaded for level: hard"]
    assert "saya suka makan" not in reply.text
