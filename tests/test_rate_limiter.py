"""Tests for the shared HTTP helpers."""

import urllib.error

import pytest

import rate_limiter
from rate_limiter import TokenBucket, _retry_request, build_url


def http_error(code, headers=None):
    return urllib.error.HTTPError("https://api.example", code, "error", hdrs=headers, fp=None)


@pytest.fixture
def sleeps(monkeypatch):
    waited = []
    monkeypatch.setattr(rate_limiter.time, "sleep", waited.append)
    return waited


class TestBuildUrl:
    """Tests for query string assembly."""

    def test_drops_empty_params(self):
        url = build_url("https://api.example/search", {"q": "Kid A", "year": None, "artist": ""})
        assert url == "https://api.example/search?q=Kid+A"

    def test_no_params(self):
        assert build_url("https://api.example/x") == "https://api.example/x"
        assert build_url("https://api.example/x", {"a": None}) == "https://api.example/x"


class TestRetryRequest:
    """Tests for retry on 429/500."""

    def test_success_first_try(self, sleeps):
        assert _retry_request(lambda: {"ok": True}) == {"ok": True}
        assert sleeps == []

    def test_429_honours_retry_after(self, sleeps):
        attempts = iter([http_error(429, {"Retry-After": "3"}), None])

        def request():
            err = next(attempts)
            if err:
                raise err
            return "done"

        assert _retry_request(request, label="Jikan") == "done"
        assert sleeps == [4]

    def test_429_without_header_backs_off(self, sleeps):
        attempts = iter([http_error(429), http_error(429), None])

        def request():
            err = next(attempts)
            if err:
                raise err
            return "done"

        assert _retry_request(request) == "done"
        assert sleeps == [20, 40]

    def test_500_retries(self, sleeps):
        attempts = iter([http_error(500), None])

        def request():
            err = next(attempts)
            if err:
                raise err
            return "done"

        assert _retry_request(request) == "done"
        assert sleeps == [5]

    def test_gives_up_after_max_retries(self, sleeps):
        def request():
            raise http_error(500)

        with pytest.raises(urllib.error.HTTPError):
            _retry_request(request, max_retries=3)
        assert sleeps == [5, 10]

    def test_other_errors_raise_immediately(self, sleeps):
        def request():
            raise http_error(404)

        with pytest.raises(urllib.error.HTTPError) as exc:
            _retry_request(request)
        assert exc.value.code == 404
        assert sleeps == []


class TestGetJson:
    """Tests for attempts made by get_json/post_json."""

    @pytest.fixture
    def failing_urlopen(self, monkeypatch):
        attempts = []

        def urlopen(req, timeout=None):
            attempts.append(req.full_url)
            raise http_error(500)

        monkeypatch.setattr(rate_limiter.urllib.request, "urlopen", urlopen)
        return attempts

    def test_single_attempt_by_default(self, failing_urlopen, sleeps):
        with pytest.raises(urllib.error.HTTPError):
            rate_limiter.get_json("https://api.example/x", {"q": "a"})
        assert failing_urlopen == ["https://api.example/x?q=a"]
        assert sleeps == []

    def test_post_single_attempt_by_default(self, failing_urlopen, sleeps):
        with pytest.raises(urllib.error.HTTPError):
            rate_limiter.post_json("https://api.example/graphql", {"query": "{}"})
        assert len(failing_urlopen) == 1

    def test_retries_are_opt_in(self, failing_urlopen, sleeps):
        with pytest.raises(urllib.error.HTTPError):
            rate_limiter.get_json("https://api.example/x", max_retries=3)
        assert len(failing_urlopen) == 3
        assert sleeps == [5, 10]


class TestTokenBucket:
    """Tests for request accounting."""

    def test_counts_requests(self, sleeps):
        bucket = TokenBucket("Test", rate_per_sec=1000, burst=5)
        for _ in range(3):
            bucket.acquire()
        assert bucket.stats()["total_requests"] == 3

    def test_print_stats_only_used(self, monkeypatch, capsys):
        used = TokenBucket("Used", rate_per_sec=1000, burst=5)
        idle = TokenBucket("Idle", rate_per_sec=1000, burst=5)
        used.acquire()
        monkeypatch.setattr(rate_limiter, "ALL_BUCKETS", [used, idle])
        rate_limiter.print_stats()
        out = capsys.readouterr().out
        assert "Used:" in out
        assert "Idle" not in out

    def test_print_stats_silent_when_unused(self, monkeypatch, capsys):
        monkeypatch.setattr(rate_limiter, "ALL_BUCKETS", [TokenBucket("Idle", 1.0)])
        rate_limiter.print_stats()
        assert capsys.readouterr().out == ""
