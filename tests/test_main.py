import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from main import main


class TestMain:
    def test_prints_accounts_and_report(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 2, 1, 10.0",
            "deposit, 1, 2, 5.0",
            "dispute, 2, 1,",
            "chargeback, 2, 1,",
            "deposit, 2, 4, 1.0",
        ]))

        assert main([str(csv_file)]) == 0

        captured = capsys.readouterr()
        assert captured.out.splitlines() == [
            "client,available,held,total,locked",
            "1,5.0000,0.0000,5.0000,false",
            "2,0.0000,0.0000,0.0000,true",
        ]
        assert "Accounts: 2, Processed: 4, Failed: 1" in captured.err

    def test_writes_failed_output(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "withdrawal, 3, 5, 50.0",
            "resolve, 3, 5,",
        ]))
        failed_file = tmp_path / "failed.csv"

        assert main([str(csv_file), "--failed-output", str(failed_file)]) == 0

        assert failed_file.read_text().splitlines() == [
            "type,client,tx,amount,reason",
            "withdrawal,3,5,50.0,insufficient_funds",
            "resolve,3,5,,unknown_transaction",
        ]
        assert "3,0.0000,0.0000,0.0000,false" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.csv")]) == 1
        assert capsys.readouterr().out == ""

    def test_malformed_input(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, one, 1, 1.0",
        ]))

        assert main([str(csv_file)]) == 1
        assert capsys.readouterr().out == ""
