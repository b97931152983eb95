from tools.generate_query_inheritance import check_units, main, write_units


def test_write_then_check(tmp_path, php_builder, employee):
    units = php_builder.build_table(employee)
    paths = write_units(units, tmp_path)
    assert [p.relative_to(tmp_path).as_posix() for p in paths] == [u.relative_path for u in units]
    assert paths[0].read_text(encoding="utf-8") == units[0].source
    assert check_units(units, tmp_path) == []

    paths[1].write_text("<?php // edited\n", encoding="utf-8")
    paths[2].unlink()
    assert check_units(units, tmp_path) == [units[1].relative_path, units[2].relative_path]


def test_main_writes_units(tmp_path, company_schema_path, capsys):
    rc = main(["--schema", str(company_schema_path), "--out", str(tmp_path)])
    assert rc == 0
    assert "OK: 6 units written" in capsys.readouterr().out
    assert (tmp_path / "Acme/Model/Base/DirectorQuery.php").exists()
    assert (tmp_path / "Fleet/Base/TruckQuery.php").exists()


def test_main_python_single_table(tmp_path, company_schema_path):
    rc = main(["--schema", str(company_schema_path), "--out", str(tmp_path), "--language", "python", "--table", "vehicle"])
    assert rc == 0
    assert sorted(p.name for p in (tmp_path / "fleet" / "base").iterdir()) == ["car_query.py", "truck_query.py"]


def test_main_check_detects_drift(tmp_path, company_schema_path, capsys):
    args = ["--schema", str(company_schema_path), "--out", str(tmp_path), "--table", "employee"]
    assert main(args + ["--check"]) == 1
    assert "DRIFT: Acme/Model/Base/ManagerQuery.php" in capsys.readouterr().out

    assert main(args) == 0
    assert main(args + ["--check"]) == 0


def test_main_timestamp_flag(tmp_path, company_schema_path):
    main(["--schema", str(company_schema_path), "--out", str(tmp_path), "--table", "vehicle", "--timestamp"])
    assert "autogenerated by stiquery" in (tmp_path / "Fleet/Base/CarQuery.php").read_text(encoding="utf-8")


def test_main_errors(tmp_path, company_schema_path, capsys):
    assert main(["--schema", str(tmp_path / "missing.yaml"), "--out", str(tmp_path)]) == 2
    assert "ERROR: Cannot read schema file" in capsys.readouterr().err

    assert main(["--schema", str(company_schema_path), "--out", str(tmp_path), "--table", "nope"]) == 2
    assert "ERROR: unknown table nope" in capsys.readouterr().err

    ghost = tmp_path / "ghost.json"
    ghost.write_text(
        '{"tables": [{"name": "user", "columns": [{"name": "k", "inheritance": "single",'
        ' "inheritances": [{"key": "g", "class": "Ghost", "extends": "Phantom"}]}]}]}',
        encoding="utf-8",
    )
    assert main(["--schema", str(ghost), "--out", str(tmp_path)]) == 2
    assert "Phantom" in capsys.readouterr().err
