"""
Tests for the review-variants command line.
"""
import json
import urllib.error

import pytest

from connections.shopify import orders
from variant_utils import cli, pipeline

from conftest import FakeClient, export_row, orders_response


@pytest.fixture(autouse=True)
def order_suffix(monkeypatch):
    monkeypatch.setattr(orders, "ORDER_NAME_SUFFIX", "-QDO")


def test_group_by_variant_prints_report(scenario_export, scenario_client, monkeypatch, capsys):
    monkeypatch.setattr(pipeline, "get_client", lambda: scenario_client)

    code = cli.main(["group-by-variant", str(scenario_export)])

    out = capsys.readouterr().out
    assert code == 0
    assert "  A (1)\n    r1" in out
    assert "  C (1)\n    r3" in out
    assert "OTHER" not in out


def test_failed_lookup_still_exits_zero(write_export, monkeypatch, capsys):
    path = write_export([export_row(f"r{i}", f"100{i}", "PID") for i in range(1, 6)])
    responses = {f"name:100{i}-QDO": orders_response(("A", "PID")) for i in range(1, 6)}
    responses["name:1004-QDO"] = urllib.error.URLError("timed out")
    monkeypatch.setattr(pipeline, "get_client", lambda: FakeClient(responses))

    code = cli.main(["group-by-variant", str(path), "--workers", "2"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Grouped: 4 review(s) into 1 variant(s)" in out
    assert "review r4, order 1004" in out


def test_group_by_variant_writes_csv(scenario_export, scenario_client, monkeypatch, tmp_path):
    monkeypatch.setattr(pipeline, "get_client", lambda: scenario_client)
    output = tmp_path / "by_variant.csv"

    code = cli.main(["group-by-variant", str(scenario_export), "--output", str(output)])

    assert code == 0
    assert output.read_text().splitlines() == ["sku,review_id", "A,r1", "C,r3"]


def test_missing_file_exits_nonzero(tmp_path, capsys):
    code = cli.main(["group-by-variant", str(tmp_path / "missing.csv")])

    assert code == 1
    assert "missing.csv" in capsys.readouterr().err


def test_missing_credentials_exit_nonzero(scenario_export, monkeypatch, capsys):
    monkeypatch.delenv("SHOP_NAME", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)

    code = cli.main(["group-by-variant", str(scenario_export)])

    assert code == 1
    assert "SHOP_NAME" in capsys.readouterr().err


def test_create_story(tmp_path, capsys):
    schema_path = tmp_path / "schema.json"
    schema_path.write_text(json.dumps({
        "name": "Product Reviews",
        "schema": [{"name": "Spacing", "fields": [{"type": "integer", "field": "stdMarginTop"}]}],
    }))

    code = cli.main(["create-story", str(schema_path), "--output-dir", str(tmp_path)])

    assert code == 0
    assert (tmp_path / "ProductReviews.stories.tsx").exists()
    assert "Created" in capsys.readouterr().out


def test_subcommand_is_required():
    with pytest.raises(SystemExit):
        cli.main([])


@pytest.mark.parametrize("workers", ["0", "-2", "many"])
def test_workers_must_be_positive(scenario_export, workers, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["group-by-variant", str(scenario_export), "--workers", workers])

    assert exc.value.code == 2
    assert "--workers" in capsys.readouterr().err


def test_create_story_into_missing_directory_exits_nonzero(tmp_path, capsys):
    schema_path = tmp_path / "schema.json"
    schema_path.write_text(json.dumps({"name": "Product Reviews", "schema": []}))

    code = cli.main(["create-story", str(schema_path), "--output-dir", str(tmp_path / "nope")])

    assert code == 1
    assert "could not create story file" in capsys.readouterr().err
