from __future__ import annotations

import pytest

from jwt_inspect.analysis import AnalysisPolicy, analyze, summarize
from jwt_inspect.codec import decode

from conftest import JWT_IO_TOKEN, NOW, make_raw_token, make_token


def _issues(header: dict, payload: dict, policy: AnalysisPolicy | None = None):
    return analyze(decode(make_token(header, payload), NOW), policy)


def _ids(issues) -> list[str]:
    return [i.id for i in issues]


@pytest.mark.parametrize(
    "payload",
    [{}, {"exp": NOW + 60, "iat": NOW}, {"sub": "1", "iss": "x", "aud": "y"}],
)
def test_none_algorithm_is_critical(payload: dict) -> None:
    issues = _issues({"alg": "none"}, payload)
    alg_none = [i for i in issues if i.id == "jwt-alg-none"]
    assert len(alg_none) == 1
    assert alg_none[0].severity == "critical"
    assert alg_none[0].category == "algorithm"


def test_hmac_algorithm_gets_key_management_note() -> None:
    issues = _issues({"alg": "HS384"}, {"exp": NOW + 60, "iat": NOW})
    assert _ids(issues) == ["jwt-symmetric-alg"]
    assert issues[0].severity == "medium"
    assert "HS384" in issues[0].description


def test_asymmetric_algorithm_has_no_algorithm_issue() -> None:
    assert _issues({"alg": "RS256"}, {"exp": NOW + 60, "iat": NOW}) == []


def test_missing_exp_is_high() -> None:
    issues = _issues({"alg": "RS256"}, {"iat": NOW})
    assert _ids(issues) == ["jwt-no-exp"]
    assert issues[0].severity == "high"


def test_reference_token_issues() -> None:
    issues = analyze(decode(JWT_IO_TOKEN, NOW))
    assert _ids(issues) == ["jwt-symmetric-alg", "jwt-no-exp"]


def test_long_lifetime_uses_exp_minus_iat() -> None:
    issues = _issues({"alg": "RS256"}, {"iat": NOW - 10, "exp": NOW - 10 + 2 * 86400})
    assert _ids(issues) == ["jwt-long-lifetime"]
    assert issues[0].severity == "medium"
    assert "48 hours" in issues[0].description


def test_one_day_lifetime_is_not_excessive() -> None:
    assert _issues({"alg": "RS256"}, {"iat": NOW, "exp": NOW + 86400}) == []


def test_lifetime_without_iat_is_measured_from_now() -> None:
    issues = _issues({"alg": "RS256"}, {"exp": NOW + 2 * 86400})
    assert "jwt-long-lifetime" in _ids(issues)
    assert "jwt-no-iat" in _ids(issues)

    short = _issues({"alg": "RS256"}, {"exp": NOW + 3600})
    assert "jwt-long-lifetime" not in _ids(short)


def test_missing_iat_is_low() -> None:
    issues = _issues({"alg": "RS256"}, {"exp": NOW + 60})
    assert [(i.id, i.severity) for i in issues] == [("jwt-no-iat", "low")]


def test_password_claim_is_sensitive_data() -> None:
    issues = _issues({"alg": "RS256"}, {"exp": NOW + 60, "iat": NOW, "password": "hunter2"})
    sensitive = [i for i in issues if i.category == "sensitive-data"]
    assert len(sensitive) == 1
    assert sensitive[0].severity == "high"
    assert "password" in sensitive[0].description


def test_sensitive_match_is_case_insensitive_and_exact() -> None:
    issues = _issues(
        {"alg": "RS256"},
        {"exp": NOW + 60, "iat": NOW, "API_Key": "k", "SSN": "1", "password_hint": "pet"},
    )
    sensitive = [i for i in issues if i.id == "jwt-sensitive-data"][0]
    assert "API_Key" in sensitive.description
    assert "SSN" in sensitive.description
    assert "password_hint" not in sensitive.description


def test_policy_is_configurable() -> None:
    policy = AnalysisPolicy.build(max_lifetime_seconds=3600, sensitive_claims=["Email"])
    payload = {"iat": NOW, "exp": NOW + 7200, "email": "a@b.c", "password": "x"}
    issues = _issues({"alg": "RS256"}, payload, policy)

    assert _ids(issues) == ["jwt-long-lifetime", "jwt-sensitive-data"]
    assert "email" in issues[1].description
    assert "password" not in issues[1].description


def test_each_call_returns_fresh_results() -> None:
    decoded = decode(JWT_IO_TOKEN, NOW)
    first = analyze(decoded)
    second = analyze(decoded)
    assert first == second
    assert first is not second


def test_summarize_counts_every_severity() -> None:
    issues = _issues({"alg": "none"}, {"password": "x"})
    assert summarize(issues) == {"critical": 1, "high": 2, "medium": 0, "low": 1}
    assert summarize([]) == {"critical": 0, "high": 0, "medium": 0, "low": 0}


@pytest.mark.parametrize(
    "payload_json",
    ['{"exp": 1e400, "iat": 1e400}', '{"exp": 1e400}', '{"exp": 1, "iat": -1e400}'],
)
def test_non_finite_time_claims_do_not_raise(payload_json: str) -> None:
    issues = analyze(decode(make_raw_token(payload_json), NOW))
    assert "jwt-long-lifetime" not in _ids(issues)


def test_unrepresentable_lifetime_is_unbounded() -> None:
    huge = "9" * 400
    issues = analyze(decode(make_raw_token(f'{{"exp": {huge}, "iat": 1.5}}'), NOW))
    lifetime = [i for i in issues if i.id == "jwt-long-lifetime"]
    assert len(lifetime) == 1
    assert lifetime[0].description.startswith("Token lifetime is unbounded")


def test_float_overflow_lifetime_is_unbounded() -> None:
    issues = analyze(decode(make_raw_token('{"exp": 1.5e308, "iat": -1.5e308}'), NOW))
    lifetime = [i for i in issues if i.id == "jwt-long-lifetime"]
    assert lifetime[0].description.startswith("Token lifetime is unbounded")


def test_policy_normalises_claim_names_on_construction() -> None:
    policy = AnalysisPolicy(sensitive_claims=frozenset({"Email"}))
    assert policy.sensitive_claims == frozenset({"email"})

    issues = _issues({"alg": "RS256"}, {"iat": NOW, "exp": NOW + 60, "EMAIL": "a@b.c"}, policy)
    assert _ids(issues) == ["jwt-sensitive-data"]
