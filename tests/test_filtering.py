"""Tests for core/filtering.py and core/model.py predicates."""

import pytest

from servicematch.content.question_bank import QuestionBank, load_question_bank
from servicematch.core.filtering import visible_questions
from servicematch.core.model import (
    AllOf,
    AnswerEquals,
    AnswerIn,
    Answered,
    AnyOf,
    Custom,
    Not,
    Option,
    Question,
)


def _q(qid, predicate=None):
    return Question(
        id=qid,
        text=f"{qid}?",
        mode="single",
        options=(Option("x", "X", {"web": 1}), Option("y", "Y", {"ai": 1})),
        predicate=predicate,
    )


@pytest.fixture
def two_question_bank():
    return QuestionBank([_q("q1"), _q("q2", predicate=AnswerEquals("q1", "x"))])


@pytest.fixture
def bank():
    return load_question_bank()


class TestPredicates:
    def test_answer_equals_single(self):
        assert AnswerEquals("q", "a").evaluate({"q": "a"})
        assert not AnswerEquals("q", "a").evaluate({"q": "b"})
        assert not AnswerEquals("q", "a").evaluate({})

    def test_answer_equals_multiple(self):
        """On a multiple-choice answer, equality means membership."""
        assert AnswerEquals("q", "a").evaluate({"q": frozenset({"a", "b"})})

    def test_answer_in(self):
        pred = AnswerIn("q", ["a", "b"])
        assert pred.evaluate({"q": "b"})
        assert pred.evaluate({"q": frozenset({"c", "a"})})
        assert not pred.evaluate({"q": frozenset({"c"})})

    def test_answered(self):
        assert Answered("q").evaluate({"q": "a"})
        assert not Answered("q").evaluate({"q": frozenset()})
        assert not Answered("q").evaluate({})

    def test_combinators(self):
        answers = {"a": "1", "b": "2"}
        assert AllOf(AnswerEquals("a", "1"), AnswerEquals("b", "2")).evaluate(answers)
        assert not AllOf(AnswerEquals("a", "1"), AnswerEquals("b", "3")).evaluate(answers)
        assert AnyOf(AnswerEquals("a", "9"), AnswerEquals("b", "2")).evaluate(answers)
        assert Not(AnswerEquals("a", "9")).evaluate(answers)

    def test_references(self):
        pred = AllOf(AnswerEquals("a", "1"), AnyOf(Answered("b"), Not(AnswerIn("c", ["x"]))))
        assert pred.references() == frozenset({"a", "b", "c"})

    def test_predicates_are_callable(self):
        assert AnswerEquals("q", "a")({"q": "a"})

    def test_custom_cannot_mutate_answers(self):
        """Predicates get a read-only view of the answers."""
        def sneaky(answers):
            answers["q1"] = "y"
            return True

        bank = QuestionBank([_q("q1"), _q("q2", predicate=Custom(sneaky, refs=["q1"]))])
        answers = {"q1": "x"}
        with pytest.raises(TypeError):
            visible_questions(bank, answers)
        assert answers == {"q1": "x"}


class TestVisibleQuestions:
    def test_scenario_hidden_follow_up(self, two_question_bank):
        """Q2 requires Q1 == 'x'; answering 'y' leaves only Q1 visible."""
        visible = visible_questions(two_question_bank, {"q1": "y"})
        assert [q.id for q in visible] == ["q1"]

    def test_follow_up_shown(self, two_question_bank):
        visible = visible_questions(two_question_bank, {"q1": "x"})
        assert [q.id for q in visible] == ["q1", "q2"]

    def test_no_answers(self, two_question_bank):
        assert [q.id for q in visible_questions(two_question_bank, {})] == ["q1"]

    def test_preserves_bank_order(self, bank):
        answers = {"project_type": "ai", "automation_scope": frozenset({"reporting"})}
        ids = [q.id for q in visible_questions(bank, answers)]
        order = [q.id for q in bank]
        assert ids == sorted(ids, key=order.index)

    def test_default_bank_website_path(self, bank):
        ids = [q.id for q in visible_questions(bank, {"project_type": "website"})]
        assert ids == ["project_type", "media_needs", "resources", "budget", "timeline"]

    def test_default_bank_unlocks_shoot_setting(self, bank):
        answers = {"project_type": "website", "media_needs": frozenset({"product_photos"})}
        ids = [q.id for q in visible_questions(bank, answers)]
        assert "shoot_setting" in ids

    def test_default_bank_ai_path(self, bank):
        ids = [q.id for q in visible_questions(bank, {"project_type": "ai"})]
        assert ids == [
            "project_type", "automation_scope", "data_readiness",
            "resources", "budget", "timeline",
        ]

    def test_list_shrinks_when_earlier_answer_changes(self, bank):
        before = visible_questions(bank, {"project_type": "ai"})
        after = visible_questions(bank, {"project_type": "video"})
        assert len(after) < len(before)

    def test_deterministic(self, bank):
        answers = {"project_type": "web_app", "automation_scope": frozenset({"customer_support"})}
        first = visible_questions(bank, answers)
        for _ in range(5):
            assert visible_questions(bank, answers) == first

    def test_stale_parent_answer_does_not_unlock_grandchild(self, bank):
        """media_needs is hidden once project_type moves to automation; its
        leftover answer must not keep shoot_setting on screen."""
        answers = {
            "project_type": "automation",
            "media_needs": frozenset({"product_photos"}),
            "shoot_setting": "studio",
        }
        ids = [q.id for q in visible_questions(bank, answers)]
        assert "media_needs" not in ids
        assert "shoot_setting" not in ids
        assert ids == ["project_type", "automation_scope", "resources", "budget", "timeline"]

    def test_stale_scope_answer_does_not_unlock_data_readiness(self, bank):
        answers = {
            "project_type": "video",
            "automation_scope": frozenset({"customer_support"}),
            "data_readiness": "plenty",
        }
        ids = [q.id for q in visible_questions(bank, answers)]
        assert "automation_scope" not in ids
        assert "data_readiness" not in ids

    def test_predicates_see_only_visible_answers(self):
        seen = []

        def record(answers):
            seen.append(dict(answers))
            return True

        bank = QuestionBank([
            _q("q1"),
            _q("q2", predicate=AnswerEquals("q1", "x")),
            _q("q3", predicate=Custom(record, refs=["q1", "q2"])),
        ])
        visible_questions(bank, {"q1": "y", "q2": "x"})
        assert seen == [{"q1": "y"}]
