import sys
import io
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from main import main
from models import ClientAccount
from report import format_decimal, write_accounts


class TestReport:
    def test_format_decimal_pads_to_four_places(self):
        assert format_decimal(Decimal("1")) == "1.0000"
        assert format_decimal(Decimal("2.5")) == "2.5000"
        assert format_decimal(Decimal("-4.5")) == "-4.5000"
        assert format_decimal(Decimal("0.0001")) == "0.0001"
        assert format_decimal(Decimal("1E+3")) == "1000.0000"

    def test_write_accounts_sorted_by_client(self):
        accounts = {
            2: ClientAccount(client_id=2, available=Decimal("2")),
            1: ClientAccount(client_id=1, available=Decimal("-1"), held=Decimal("3"), locked=True),
        }
        stream = io.StringIO()

        write_accounts(accounts, stream)

        assert stream.getvalue().splitlines() == [
            "client,available,held,total,locked",
            "1,-1.0000,3.0000,2.0000,true",
            "2,2.0000,0.0000,2.0000,false",
        ]


class TestMain:
    def test_prints_account_table(self, tmp_path, capsys, caplog):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 2.0",
            "deposit, 2, 2, 2.0",
            "dispute, 1, 1,",
            "chargeback, 1, 1,",
            "chargeback, 2, 2,",
        ]))

        exit_code = main([str(csv_file)])

        captured = capsys.readouterr()
        assert exit_code == 0
        assert captured.out.splitlines() == [
            "client,available,held,total,locked",
            "1,0.0000,0.0000,0.0000,true",
            "2,2.0000,0.0000,2.0000,false",
        ]
        assert "Skipping chargeback transaction for non-disputed transaction: 2" in caplog.text

    def test_overdraft_flag(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "withdrawal, 1, 1, 1.5",
        ]))

        assert main([str(csv_file), "--allow-overdraft"]) == 0
        assert "1,-1.5000,0.0000,-1.5000,false" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys, caplog):
        exit_code = main([str(tmp_path / "missing.csv")])

        captured = capsys.readouterr()
        assert exit_code == 1
        assert captured.out == ""
        assert "Cannot read" in caplog.text

    def test_usage_error(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2
        assert "usage" in capsys.readouterr().err

    def test_oversized_amount_is_skipped_not_fatal(self, tmp_path, capsys, caplog):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 1000000000000000000000000.0001",
            "deposit, 1, 2, 99999999999999.9999",
        ]))

        assert main([str(csv_file)]) == 0
        assert "1,99999999999999.9999,0.0000,99999999999999.9999,false" in capsys.readouterr().out
        assert "integer digits" in caplog.text
