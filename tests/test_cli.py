import json

from libp3d.reader import read_p3d_file
from p3dcli.main import EXIT_OK, EXIT_PARSE, EXIT_POLYGON, EXIT_READ, EXIT_USAGE, main

from conftest import mesh, quad


def test_compile_defaults_to_model_and_rig(write_p3di, blaster_doc, tmp_path):
    src = write_p3di(blaster_doc, "dlt19.p3di")
    assert main(["compile", str(src)]) == EXIT_OK
    assert read_p3d_file(str(tmp_path / "dlt19.p3d")).magic == b"P3D"
    assert read_p3d_file(str(tmp_path / "dlt19.p3dr")).magic == b"P3DR"
    assert not (tmp_path / "dlt19.png").exists()


def test_compile_map_only(write_p3di, blaster_doc, tmp_path):
    src = write_p3di(blaster_doc, "dlt19.p3di")
    out = tmp_path / "out"
    assert main(["compile", str(src), "--map", "--map-resolution", "64", "--out-dir", str(out)]) == EXIT_OK
    assert (out / "dlt19.png").exists()
    assert not (out / "dlt19.p3d").exists()
    assert not (out / "dlt19.p3dr").exists()


def test_compile_missing_input(tmp_path):
    assert main(["compile", str(tmp_path / "nope.p3di")]) == EXIT_USAGE


def test_compile_parse_error(tmp_path):
    src = tmp_path / "broken.p3di"
    src.write_text("{ not json", encoding="utf-8")
    assert main(["compile", str(src)]) == EXIT_PARSE
    assert not (tmp_path / "broken.p3d").exists()


def test_compile_pentagon(write_p3di, tmp_path):
    five = quad()
    five["vertices"].append(five["vertices"][0])
    src = write_p3di({"version": 1, "meshes": [mesh("Grip", faces=[five])]}, "bad.p3di")
    assert main(["compile", str(src), "--model"]) == EXIT_POLYGON
    assert not (tmp_path / "bad.p3d").exists()


def test_compile_unknown_material_succeeds(write_p3di, tmp_path):
    src = write_p3di({"version": 1, "meshes": [mesh("Body", faces=[quad()], material="MAT_FOO")]}, "m.p3di")
    assert main(["compile", str(src), "--model"]) == EXIT_OK
    assert read_p3d_file(str(tmp_path / "m.p3d")).meshes[0].material == 0


def test_summary(write_p3di, blaster_doc, tmp_path, capsys):
    src = write_p3di(blaster_doc, "dlt19.p3di")
    assert main(["compile", str(src)]) == EXIT_OK
    capsys.readouterr()

    assert main(["summary", str(tmp_path / "dlt19.p3d")]) == EXIT_OK
    out = capsys.readouterr().out
    assert "Barrel" in out
    assert "MAT_EMISSIVE" in out

    assert main(["summary", str(src)]) == EXIT_OK
    assert "muzzle" in capsys.readouterr().out


def test_summary_bad_file(tmp_path):
    path = tmp_path / "junk.p3d"
    path.write_bytes(b"nope")
    assert main(["summary", str(path)]) == EXIT_READ
