"""Unit tests for the password strength evaluator."""
import pytest

from cybersafe.services.password_strength import (
    Requirements,
    check_password_strength,
    evaluate,
    evaluate_weighted,
    is_common,
    is_strong,
    strength_text,
    weighted_strength_text,
)
from cybersafe.utils.errors import ValidationError

LABELS = ["Very Weak", "Weak", "Moderate", "Strong", "Very Strong"]


@pytest.mark.unit
class TestEvaluate:
    def test_empty_password(self):
        result = evaluate("")
        assert result.strength == 0
        assert result.strength_text == "Very Weak"
        assert result.requirements == Requirements()
        assert not any(vars(result.requirements).values())

    def test_leet_common_password_still_scores_full(self):
        result = evaluate("P@ssw0rd1234")
        r = result.requirements
        assert (r.length, r.uppercase, r.lowercase, r.number, r.special) == (True, True, True, True, True)
        assert r.not_common is False
        assert result.strength == 100
        assert result.strength_text == "Very Strong"

    def test_repeated_lowercase_meets_length_and_lowercase(self):
        result = evaluate("aaaaaaaaaaaa")
        r = result.requirements
        assert r.length and r.lowercase
        assert not (r.uppercase or r.number or r.special)
        assert result.strength == 40
        assert result.strength_text == "Moderate"

    def test_single_requirement_is_weak_not_very_weak(self):
        result = evaluate("abc")
        assert result.strength == 20
        assert result.strength_text == "Weak"

    def test_short_mixed_password(self):
        result = evaluate("Ab1!")
        assert result.requirements.length is False
        assert result.strength == 80
        assert result.strength_text == "Very Strong"

    @pytest.mark.parametrize(
        "password",
        ["", "a", "A", "1", "#", "aA", "a1#", "aA1#", "abcdefghijkl", "ABCDEFGHIJKL1", "Tr0ub4dor&3xyz", "P@ssw0rd1234"],
    )
    def test_strength_is_twenty_per_scored_requirement(self, password):
        result = evaluate(password)
        assert 0 <= result.strength <= 100
        assert result.strength == 20 * sum(result.requirements.scored())

    def test_not_common_does_not_add_points(self):
        common = evaluate("Password123!")
        uncommon = evaluate("Blueberry123!")
        assert common.requirements.not_common is False
        assert uncommon.requirements.not_common is True
        assert common.strength == uncommon.strength == 100

    def test_deterministic(self):
        assert evaluate("Tr0ub4dor&3xyz") == evaluate("Tr0ub4dor&3xyz")


@pytest.mark.unit
class TestStrengthText:
    @pytest.mark.parametrize(
        "strength,label",
        [
            (0, "Very Weak"),
            (19, "Very Weak"),
            (20, "Weak"),
            (39, "Weak"),
            (40, "Moderate"),
            (59, "Moderate"),
            (60, "Strong"),
            (79, "Strong"),
            (80, "Very Strong"),
            (100, "Very Strong"),
        ],
    )
    def test_bucket_edges(self, strength, label):
        assert strength_text(strength) == label

    def test_monotonic(self):
        ranks = [LABELS.index(strength_text(s)) for s in range(0, 101)]
        assert ranks == sorted(ranks)


@pytest.mark.unit
class TestCommonPasswords:
    @pytest.mark.parametrize("password", ["password", "PASSWORD1", "123456789", "MyQwertyKeys", "Adm1n!", "iloveyou2", "p@$$w0rd"])
    def test_blocklisted(self, password):
        assert is_common(password) is True
        assert evaluate(password).requirements.not_common is False

    @pytest.mark.parametrize("password", ["Tr0ub4dor&3xyz", "correct-horse-battery-staple", "Zebra#Lamp77"])
    def test_not_blocklisted(self, password):
        assert is_common(password) is False
        assert evaluate(password).requirements.not_common is True


@pytest.mark.unit
class TestCheckPasswordStrength:
    def test_delegates_to_evaluate(self):
        assert check_password_strength("Zebra#Lamp77") == evaluate("Zebra#Lamp77")

    @pytest.mark.parametrize("value", [None, 12345, b"bytes", ["list"]])
    def test_rejects_non_string(self, value):
        with pytest.raises(ValidationError):
            check_password_strength(value)

    def test_is_strong_threshold(self):
        assert is_strong(evaluate("Ab1!")) is True  # 80
        assert is_strong(evaluate("Ab1")) is False  # 60


@pytest.mark.unit
class TestWeightedModel:
    def test_empty(self):
        assert evaluate_weighted("") == 0

    def test_common_word_is_penalised(self):
        # length>=8 (20) + lowercase (15) - common pattern (20)
        assert evaluate_weighted("password") == 15

    def test_repeated_characters_are_penalised(self):
        # lowercase (15) - repeated run (10)
        assert evaluate_weighted("aaa") == 5

    def test_clamped_to_hundred(self):
        assert evaluate_weighted("Tr0ub4dor&3xyz") == 100

    def test_class_bonus(self):
        # length>=8 (20) + upper (20) + lower (15) + digit (15) + three classes (10)
        assert evaluate_weighted("Zebralamp7") == 80

    @pytest.mark.parametrize("strength,label", [(0, "Weak"), (29, "Weak"), (30, "Moderate"), (60, "Strong"), (80, "Very Strong")])
    def test_weighted_labels(self, strength, label):
        assert weighted_strength_text(strength) == label
