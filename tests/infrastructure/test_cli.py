"""End-to-end CLI tests against the JSON backend in a temp directory."""

import json

import pytest
from click.testing import CliRunner

from orderedit.infrastructure.cli.main import cli
from tests.fakes import menu_items, raw_order


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "orders.json").write_text(json.dumps([raw_order()]), encoding="utf-8")
    (tmp_path / "menu_items.json").write_text(json.dumps(menu_items()), encoding="utf-8")
    return tmp_path


def _invoke(data_dir, args, input=None):
    runner = CliRunner()
    env = {"ORDEREDIT_BACKEND": "json", "ORDEREDIT_DATA_DIR": str(data_dir)}
    return runner.invoke(cli, ["order", *args], input=input, env=env)


def _stored_order(data_dir):
    return json.loads((data_dir / "orders.json").read_text())[0]


def test_show(data_dir):
    result = _invoke(data_dir, ["show", "--id", "42"])
    assert result.exit_code == 0, result.output
    assert "Order #42" in result.output
    assert "Hafa Tee" in result.output
    assert "$23.50" in result.output


def test_show_missing_order(data_dir):
    result = _invoke(data_dir, ["show", "--id", "99"])
    assert result.exit_code == 1
    assert "Order #99 not found" in result.output


def test_edit_quantity_and_recalculate_total(data_dir):
    result = _invoke(
        data_dir,
        ["edit", "--id", "42", "--set", "1:quantity=4", "--add", "Extra rice:1:2.00", "--recalculate-total"],
    )

    assert result.exit_code == 0, result.output
    assert "Order #42 saved" in result.output
    stored = _stored_order(data_dir)
    assert [i["quantity"] for i in stored["items"]] == [4, 1, 1]
    assert stored["items"][2]["payment_status"] == "needs_payment"
    assert stored["total"] == 30.0


def test_remove_tracked_item_as_damaged(data_dir):
    result = _invoke(data_dir, ["edit", "--id", "42", "--remove", "2"], input="damaged\ndropped\n")

    assert result.exit_code == 0, result.output
    assert "Hafa Tee: 1 -> 0" in result.output
    assert [i["name"] for i in _stored_order(data_dir)["items"]] == ["Spam Musubi"]
    tee = json.loads((data_dir / "menu_items.json").read_text())[1]
    assert tee["damaged_quantity"] == 1
    assert tee["damage_log"][0]["reason"] == "dropped"


def test_remove_untracked_item_does_not_prompt(data_dir):
    result = _invoke(data_dir, ["edit", "--id", "42", "--remove", "1"])
    assert result.exit_code == 0, result.output
    assert [i["name"] for i in _stored_order(data_dir)["items"]] == ["Hafa Tee"]


def test_move_to_preparing_sets_pickup_time(data_dir):
    result = _invoke(data_dir, ["edit", "--id", "42", "--status", "preparing", "--eta", "20"])

    assert result.exit_code == 0, result.output
    stored = _stored_order(data_dir)
    assert stored["status"] == "preparing"
    assert stored["estimated_pickup_time"].endswith("Z")


def test_invalid_edit_field(data_dir):
    result = _invoke(data_dir, ["edit", "--id", "42", "--set", "1:color=red"])
    assert result.exit_code == 1
    assert "cannot be edited" in result.output
    assert _stored_order(data_dir)["items"][0]["quantity"] == 3


def test_eta_preview(data_dir):
    result = _invoke(data_dir, ["eta", "--id", "42", "--eta", "15"])
    assert result.exit_code == 0, result.output
    assert result.output.startswith("ETA 15 -> ")
    assert "ChST" in result.output
