import pytest
from pydantic import ValidationError

from models.responses import AssessmentResult, level_for_score
from models.schemas.candidate import CandidateObject
from services.json_extractor import extract_json
from services.result_normalizer import (
    FALLBACK_SUGGESTIONS,
    PLACEHOLDER_REASONS,
    normalize_result,
    validate_result,
)


class TestLevelMapping:
    @pytest.mark.parametrize(
        "score, level",
        [
            (0, "Beginner"),
            (4, "Beginner"),
            (5, "Intermediate"),
            (6, "Intermediate"),
            (7, "Advanced"),
            (8, "Advanced"),
            (9, "Near-native"),
            (10, "Native-like"),
        ],
    )
    def test_thresholds(self, score, level):
        assert level_for_score(score) == level

    def test_model_level_is_ignored(self):
        out = normalize_result({"score": 9, "level": "Beginner"})
        assert out["level"] == "Near-native"


class TestScore:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (-3, 0),
            (14.6, 10),
            (7, 7),
            (6.5, 7),
            (6.49, 6),
            ("8", 8),
            (" 4.5 ", 5),
            ("eight", 0),
            (None, 0),
            (True, 0),
            ([7], 0),
            (float("nan"), 0),
            (10**400, 10),
            (float("inf"), 10),
            (float("-inf"), 0),
            ("Infinity", 10),
            ("-Infinity", 0),
            ("1e3", 10),
            ("1_0", 0),
            ("nan", 0),
            ("inf", 0),
            ("", 0),
        ],
    )
    def test_coercion(self, raw, expected):
        assert normalize_result({"score": raw})["score"] == expected

    def test_missing_score(self):
        out = normalize_result({})
        assert out["score"] == 0
        assert out["level"] == "Beginner"

    def test_negative_is_beginner(self):
        out = normalize_result({"score": -3})
        assert (out["score"], out["level"]) == (0, "Beginner")

    def test_rounds_before_clamping(self):
        out = normalize_result({"score": 14.6})
        assert (out["score"], out["level"]) == (10, "Native-like")

    def test_overflowed_literal_is_top_score(self):
        out = normalize_result(extract_json('{"score": 1e999}'))
        assert (out["score"], out["level"]) == (10, "Native-like")


class TestReasons:
    def test_kept_and_trimmed(self):
        assert normalize_result({"reasons": "  Fluent.  "})["reasons"] == "Fluent."

    @pytest.mark.parametrize("raw", [None, "", "   ", 5, ["a"]])
    def test_placeholder(self, raw):
        assert normalize_result({"reasons": raw})["reasons"] == PLACEHOLDER_REASONS


class TestSuggestions:
    def test_dedup_by_case_and_whitespace(self):
        out = normalize_result({
            "suggestions": ["Use the present perfect here.", "  use the   PRESENT perfect here. "],
        })
        assert out["suggestions"] == ["Use the present perfect here."]

    def test_filters_non_text_short_and_generic(self):
        out = normalize_result({
            "suggestions": [
                42,
                None,
                "Ok.",
                "Keep practicing!",
                "Practice more.",
                "Prefer 'looking forward to meeting' over 'to meet'.",
            ],
        })
        assert out["suggestions"] == ["Prefer 'looking forward to meeting' over 'to meet'."]

    def test_capped_at_six(self):
        tips = [f"Specific tip number {i} about articles." for i in range(10)]
        out = normalize_result({"suggestions": tips})
        assert out["suggestions"] == tips[:6]

    @pytest.mark.parametrize("raw", [None, "Use more idioms.", [], ["", "  "]])
    def test_fallback_list(self, raw):
        assert normalize_result({"suggestions": raw})["suggestions"] == list(FALLBACK_SUGGESTIONS)

    def test_scenario_b_both_filtered(self):
        out = normalize_result({"score": 12, "suggestions": ["Practice more", "practice MORE "]})
        assert out == {
            "score": 10,
            "level": "Native-like",
            "reasons": PLACEHOLDER_REASONS,
            "suggestions": list(FALLBACK_SUGGESTIONS),
        }


class TestShapes:
    def test_sequence_uses_first_element(self):
        out = normalize_result([{"score": 9}, {"score": 1}])
        assert out["score"] == 9

    @pytest.mark.parametrize("payload", [[], "text", 5, None, [3, {"score": 9}]])
    def test_non_objects_default(self, payload):
        out = normalize_result(payload)
        assert out["score"] == 0
        assert out["reasons"] == PLACEHOLDER_REASONS

    def test_accepts_candidate_object(self):
        out = normalize_result(CandidateObject({"score": 5}))
        assert out["level"] == "Intermediate"


class TestContract:
    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"score": 3.7, "reasons": "ok", "suggestions": ["Try inverted conditionals sometimes."]},
            [{"score": "9", "level": "Native-like", "suggestions": ["a", "b"]}],
            {"score": 100, "reasons": "   ", "suggestions": "not a list"},
        ],
    )
    def test_output_always_valid(self, payload):
        out = normalize_result(payload)
        result = validate_result(out)
        assert 0 <= result.score <= 10
        assert result.level == level_for_score(result.score)

    @pytest.mark.parametrize(
        "payload",
        [
            {"score": -1},
            {"score": 14.6, "suggestions": ["Practice more", "practice MORE "]},
            {"score": 9, "reasons": " Nice ", "suggestions": ["Avoid 'suggested to go'.", "AVOID 'suggested  to go'."]},
        ],
    )
    def test_idempotent(self, payload):
        once = normalize_result(payload)
        assert normalize_result(once) == once


class TestStrictValidator:
    def _valid(self, **overrides):
        base = {
            "score": 7,
            "level": "Advanced",
            "reasons": "Natural.",
            "suggestions": ["Vary sentence openings to avoid repetition."],
        }
        base.update(overrides)
        return base

    def test_accepts_valid(self):
        assert isinstance(validate_result(self._valid()), AssessmentResult)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"score": 11},
            {"score": -1},
            {"score": 7.5},
            {"score": "7"},
            {"level": "Expert"},
            {"level": "Near-native"},
            {"reasons": "  "},
            {"suggestions": []},
            {"suggestions": ["Tip one is here."] * 2},
            {"suggestions": [f"Distinct tip {i}" for i in range(7)]},
        ],
    )
    def test_rejects_out_of_contract(self, overrides):
        with pytest.raises(ValidationError):
            validate_result(self._valid(**overrides))
