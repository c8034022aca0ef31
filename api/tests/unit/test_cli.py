#!/usr/bin/env python3

import json
from unittest.mock import patch

import pytest
import yaml

from xsd_metadata.cli import main

from tests.fixtures.xsd_fixtures import MALFORMED_XSD, ORDER_XSD


@pytest.mark.unit
class TestCli:
    """Test suite for the xsd-metadata command"""

    @pytest.fixture
    def order_file(self, tmp_path):
        path = tmp_path / "order.xsd"
        path.write_bytes(ORDER_XSD)
        return path

    @pytest.fixture(autouse=True)
    def no_logging_setup(self):
        with patch("xsd_metadata.cli.setup_logging"):
            yield

    def test_text_output(self, order_file, capsys):
        exit_code = main([str(order_file)])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert out.startswith("XSD_ROOT\n")
        assert "Item [0..unbounded]" in out

    def test_text_output_with_paths(self, order_file, capsys):
        main([str(order_file), "--paths"])

        out = capsys.readouterr().out
        assert "Paths:" in out
        assert "Order/Item/Name : xs:string" in out

    def test_json_output(self, order_file, capsys):
        main([str(order_file), "--format", "json"])

        data = json.loads(capsys.readouterr().out)
        assert data["child_elements"]["Order"]["attributes"]["id"]["required"] is True

    def test_flat_output(self, order_file, capsys):
        """The flat format lists every element with its path and depth"""
        exit_code = main([str(order_file), "--format", "flat"])

        rows = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert [(row["path"], row["depth"]) for row in rows] == [
            ("Order", 0),
            ("Order/Item", 1),
            ("Order/Item/Name", 2),
        ]
        assert rows[0]["attributes"] == ["id"]
        assert rows[1]["cardinality"] == "0..unbounded"
        assert rows[1]["parent_path"] == "Order"

    def test_yaml_output_to_file(self, order_file, tmp_path):
        out_file = tmp_path / "tree.yaml"

        exit_code = main([str(order_file), "--format", "yaml", "--out", str(out_file)])

        data = yaml.safe_load(out_file.read_text())
        assert exit_code == 0
        assert data["name"] == "XSD_ROOT"
        assert data["child_elements"]["Order"]["child_elements"]["Item"]["max_occurs"] == "unbounded"

    def test_load_failure(self, tmp_path, capsys):
        bad = tmp_path / "bad.xsd"
        bad.write_bytes(MALFORMED_XSD)

        exit_code = main([str(bad)])

        assert exit_code == 1
        assert "error:" in capsys.readouterr().err

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "missing.xsd")]) == 1
