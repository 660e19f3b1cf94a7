import asyncio
import uuid

import pytest

from helpers import FRAME_B64, model_answer
from models.commentary_models import CommentaryRequest
from utils.errors import InvalidInput, PayloadTooLarge, UpstreamError


def make_request(session_id="match-1", meta=None, prev=FRAME_B64, cur=FRAME_B64):
    return CommentaryRequest(image_base64=cur, prev_image_base64=prev, meta=meta or {}, session_id=session_id)


def decide(decider, request):
    return asyncio.run(decider.decide(request))


class TestSessionResolution:
    def test_uses_trimmed_client_session_id(self, decider):
        assert decide(decider, make_request(session_id="  match-1 ")).session_id == "match-1"

    def test_generates_session_id_when_blank(self, decider):
        session_id = decide(decider, make_request(session_id="   ")).session_id
        assert uuid.UUID(session_id)


class TestValidation:
    @pytest.mark.parametrize(
        "prev, cur",
        [("", FRAME_B64), (FRAME_B64, ""), ("data:image/jpeg;base64,", FRAME_B64)],
    )
    def test_missing_frame(self, decider, gateway, prev, cur):
        with pytest.raises(InvalidInput) as excinfo:
            decide(decider, make_request(prev=prev, cur=cur))
        assert excinfo.value.session_id == "match-1"
        gateway.generate.assert_not_awaited()

    def test_oversized_frame(self, decider, gateway, store):
        with pytest.raises(PayloadTooLarge) as excinfo:
            decide(decider, make_request(cur="A" * 700_000))
        assert excinfo.value.detail["curBytes"] == 525_000
        gateway.generate.assert_not_awaited()
        assert "match-1" not in store

    def test_strips_data_url_before_calling_model(self, decider, gateway):
        decide(decider, make_request(prev="data:image/jpeg;base64,PREV", cur="data:image/jpeg;base64,CUR"))
        prompt, prev, cur = gateway.generate.await_args.args
        assert (prev, cur) == ("PREV", "CUR")
        assert "JSON" in prompt


class TestFieldExtraction:
    def test_reads_wrapped_json(self, decider, gateway):
        gateway.generate.return_value = 'blah {"commentary":"x","topic":"Sports","confidence":0.8} blah'
        decision = decide(decider, make_request())
        assert (decision.commentary, decision.topic, decision.confidence) == ("x", "Sports", 0.8)
        assert decision.advantage is None

    @pytest.mark.parametrize("raw", ["no json here", "{broken", "{not json}", ""])
    def test_unreadable_output_degrades_to_defaults(self, decider, gateway, store, raw):
        gateway.generate.return_value = raw
        decision = decide(decider, make_request())
        assert (decision.commentary, decision.topic, decision.confidence) == ("", "Other", 0.0)
        assert store.recent_texts("match-1") == []

    @pytest.mark.parametrize("confidence, expected", [(1.7, 1.0), (-3, 0.0), ("high", 0.0), (None, 0.0), (0.25, 0.25)])
    def test_confidence_is_clamped(self, decider, gateway, confidence, expected):
        gateway.generate.return_value = model_answer("x", confidence=confidence)
        assert decide(decider, make_request()).confidence == expected

    @pytest.mark.parametrize("confidence, expected", [(10**400, 1.0), (-(10**400), 0.0)])
    def test_oversized_integer_confidence_is_clamped(self, decider, gateway, confidence, expected):
        gateway.generate.return_value = model_answer("x", confidence=confidence)
        assert decide(decider, make_request()).confidence == expected

    def test_topic_is_truncated_and_defaulted(self, decider, gateway):
        gateway.generate.return_value = model_answer("a", topic="T" * 50)
        assert decide(decider, make_request()).topic == "T" * 20

        gateway.generate.return_value = model_answer("b", topic="")
        assert decide(decider, make_request()).topic == "Other"


class TestAdvantage:
    META = {"enableAdvantage": True, "redFeatures": "red bib", "blueFeatures": "blue bib"}

    def test_present_when_enabled_and_red_is_numeric(self, decider, gateway):
        gateway.generate.return_value = model_answer(
            "x", advantage={"red": 1.4, "blue": -0.2, "reason": "R" * 100}
        )
        advantage = decide(decider, make_request(meta=self.META)).advantage
        assert advantage.red == 1.0
        assert advantage.blue == 0.0
        assert advantage.reason == "R" * 80

    def test_blue_defaults_to_complement(self, decider, gateway):
        gateway.generate.return_value = model_answer("x", advantage={"red": 0.7})
        advantage = decide(decider, make_request(meta=self.META)).advantage
        assert advantage.blue == pytest.approx(0.3)
        assert advantage.reason == ""

    def test_oversized_integer_scores_are_clamped(self, decider, gateway):
        gateway.generate.return_value = model_answer("x", advantage={"red": 10**400, "blue": -(10**400)})
        advantage = decide(decider, make_request(meta=self.META)).advantage
        assert advantage.red == 1.0
        assert advantage.blue == 0.0

    @pytest.mark.parametrize(
        "meta, advantage",
        [
            ({}, {"red": 0.6, "blue": 0.4}),
            (META, {"red": "0.6", "blue": 0.4}),
            (META, {"blue": 0.4}),
            (META, None),
        ],
    )
    def test_absent_otherwise(self, decider, gateway, meta, advantage):
        extra = {"advantage": advantage} if advantage is not None else {}
        gateway.generate.return_value = model_answer("x", **extra)
        decision = decide(decider, make_request(meta=meta))
        assert decision.advantage is None
        assert "advantage" not in decision.to_dict()


class TestRepetitionControl:
    def test_accepted_commentary_is_remembered(self, decider, gateway, store):
        gateway.generate.return_value = model_answer("赤が先制しました")
        assert decide(decider, make_request()).commentary == "赤が先制しました"
        assert store.recent_texts("match-1") == ["赤が先制しました"]

    @pytest.mark.parametrize("repeat", ["赤が先制しました！", "赤が先制", "赤が先制しました、会場が沸いています"])
    def test_near_duplicate_is_suppressed(self, decider, gateway, store, repeat):
        gateway.generate.return_value = model_answer("赤が先制しました")
        decide(decider, make_request())

        gateway.generate.return_value = model_answer(repeat)
        assert decide(decider, make_request()).commentary == ""
        assert store.recent_texts("match-1") == ["赤が先制しました"]

    def test_other_sessions_are_independent(self, decider, gateway):
        gateway.generate.return_value = model_answer("赤が先制しました")
        decide(decider, make_request(session_id="a"))
        assert decide(decider, make_request(session_id="b")).commentary == "赤が先制しました"

    def test_history_feeds_prompt_and_stays_bounded(self, decider, gateway, store):
        for letter in "ABCDEFGHIJKLM":
            gateway.generate.return_value = model_answer(f"event-{letter}")
            decide(decider, make_request())

        history = store.recent_texts("match-1")
        assert len(history) == 12
        assert "event-A" not in history

        decide(decider, make_request())
        prompt = gateway.generate.await_args.args[0]
        assert "event-H / event-I / event-J / event-K / event-L / event-M" in prompt
        assert "event-A" not in prompt


class TestUpstreamFailure:
    def test_propagates_and_leaves_memory_untouched(self, decider, gateway, store):
        gateway.generate.return_value = model_answer("赤が先制しました")
        decide(decider, make_request())

        gateway.generate.side_effect = UpstreamError("Model API error: 503", status=503, body="overloaded")
        with pytest.raises(UpstreamError) as excinfo:
            decide(decider, make_request())

        assert excinfo.value.session_id == "match-1"
        assert excinfo.value.detail["status"] == 503
        assert store.recent_texts("match-1") == ["赤が先制しました"]
