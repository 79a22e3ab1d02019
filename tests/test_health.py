import json

from newsbot.health import HealthReport


def test_write_deduplicates_errors(tmp_path):
    report = HealthReport("newswire", health_dir=tmp_path)
    report.genre = "gta_online"
    report.set_results_count("7")
    report.article_id = "42"
    report.record_error("detail failed")
    report.record_error("detail failed")
    report.record_error("")
    report.record_error("commit failed")

    path = report.write()

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert path == tmp_path / "newswire.json"
    assert payload["genre"] == "gta_online"
    assert payload["results_count"] == 7
    assert payload["article_id"] == "42"
    assert payload["published"] is False
    assert payload["errors"] == ["detail failed", "commit failed"]
    assert payload["last_run"].endswith("Z")


def test_bad_counts_coerced(tmp_path):
    report = HealthReport("newswire", health_dir=tmp_path)
    report.set_results_count("many")
    assert report.results_count == 0
    report.set_results_count(-3)
    assert report.results_count == 0
