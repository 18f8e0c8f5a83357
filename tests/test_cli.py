import json

import pytest

from cveval.__main__ import build_parser, main


def test_prints_report(arff_files, capsys):
    status = main([str(arff_files["dataset"]), str(arff_files["splits"]), str(arff_files["predictions"]), "class"])

    captured = capsys.readouterr()
    report = json.loads(captured.out)
    assert status == 0
    assert report["confusion_matrix"] == [[1, 1], [1, 1]]
    assert report["global_metrics"]["predictive_accuracy"]["value"] == pytest.approx(0.5)
    assert len(report["fold_metrics"][0]) == 2


def test_failure_writes_no_report(arff_files, capsys):
    predictions = arff_files["predictions"]
    # drop the prediction for row 1
    lines = [line for line in predictions.read_text().splitlines() if not line.startswith("0,0,1,")]
    predictions.write_text("\n".join(lines) + "\n")

    status = main([str(arff_files["dataset"]), str(arff_files["splits"]), str(predictions), "class"])

    captured = capsys.readouterr()
    assert status == 1
    assert captured.out == ""
    assert "(repeat=0, fold=0, row_id=1)" in captured.err


def test_unknown_target_fails(arff_files, capsys):
    status = main([str(arff_files["dataset"]), str(arff_files["splits"]), str(arff_files["predictions"]), "label"])

    assert status == 1
    assert "Class attribute (label) not found" in capsys.readouterr().err


def test_parser_defaults():
    args = build_parser().parse_args(["d.arff", "s.arff", "p.arff", "class"])

    assert args.indent == 2
    assert args.log_level == "WARNING"
