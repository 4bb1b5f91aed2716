import json
import pathlib

import pypdf
import pytest

import sheet_imposer.cli


#============================================
def test_plan_only_prints_layout(capsys, make_image_file) -> None:
	"""
	Ensure --plan-only reports the layout without writing a PDF.
	"""
	front = make_image_file("front.png", 180, 100)
	sheet_imposer.cli.main([str(front), "-t", "business-card", "-q", "25", "--plan-only"])
	captured = capsys.readouterr().out
	assert "Sheet: A4" in captured
	assert "Grid: 2x5 (10 per sheet)" in captured
	assert "Sheets per side: 3" in captured
	assert "Output PDF" not in captured


#============================================
def test_full_render(tmp_path: pathlib.Path, make_image_file) -> None:
	"""
	Ensure the CLI writes the PDF and its manifest.
	"""
	front = make_image_file("front.png", 200, 100)
	back = make_image_file("back.png", 200, 100, "blue")
	output = tmp_path / "sheets.pdf"
	sheet_imposer.cli.main([
		str(front), "-b", str(back), "-W", "100", "-H", "50",
		"-n", "2", "-s", "A4", "-d", "-o", str(output),
	])
	reader = pypdf.PdfReader(str(output))
	assert len(reader.pages) == 4
	manifest = json.loads(pathlib.Path(f"{output}.json").read_text(encoding="utf-8"))
	assert manifest["layout"]["quantity"] == 20
	assert manifest["front_pages"] == 2
	assert manifest["back_pages"] == 2
	assert manifest["back_inputs"] == [str(back)]


#============================================
def test_canvas_preset_from_cli(capsys, make_image_file) -> None:
	"""
	Ensure canvas presets and wrap bleed flow through the CLI.
	"""
	front = make_image_file("photo.png", 400, 300)
	sheet_imposer.cli.main([str(front), "-t", "canvas-wrap", "--canvas-preset", "A3", "--plan-only"])
	captured = capsys.readouterr().out
	assert "Item: 400x300mm (bleed 40mm" in captured
	assert "Sheet: A2 (594x420mm)" in captured


#============================================
def test_invalid_width_exits(capsys, make_image_file) -> None:
	"""
	Ensure layout errors exit with status 2 and a message.
	"""
	front = make_image_file("front.png", 100, 100)
	with pytest.raises(SystemExit) as excinfo:
		sheet_imposer.cli.main([str(front), "-W", "5", "-H", "50", "--plan-only"])
	assert excinfo.value.code == 2
	assert "Error:" in capsys.readouterr().out


#============================================
def test_quantity_and_sheets_conflict(make_image_file) -> None:
	"""
	Ensure --quantity and --sheets cannot be combined.
	"""
	front = make_image_file("front.png", 100, 100)
	with pytest.raises(SystemExit):
		sheet_imposer.cli.parse_args([str(front), "-q", "5", "-n", "2"])


#============================================
def test_unreadable_front_artwork_exits(tmp_path: pathlib.Path, capsys) -> None:
	"""
	Ensure a run where no front artwork loads exits 2 without writing a PDF.
	"""
	output = tmp_path / "sheets.pdf"
	with pytest.raises(SystemExit) as excinfo:
		sheet_imposer.cli.main([
			str(tmp_path / "typo.png"), "-W", "100", "-H", "50", "-o", str(output),
		])
	assert excinfo.value.code == 2
	assert "Error:" in capsys.readouterr().out
	assert not output.exists()


#============================================
def test_unreadable_back_artwork_exits(tmp_path: pathlib.Path, make_image_file) -> None:
	"""
	Ensure a double-sided run whose back artwork all fails exits 2.
	"""
	front = make_image_file("front.png", 200, 100)
	bogus = tmp_path / "back.png"
	bogus.write_text("not an image", encoding="utf-8")
	output = tmp_path / "sheets.pdf"
	with pytest.raises(SystemExit) as excinfo:
		sheet_imposer.cli.main([
			str(front), "-b", str(bogus), "-d", "-W", "100", "-H", "50", "-o", str(output),
		])
	assert excinfo.value.code == 2
	assert not output.exists()


#============================================
def test_negative_spacing_exits(capsys, make_image_file) -> None:
	"""
	Ensure negative spacing from the command line exits 2.
	"""
	front = make_image_file("front.png", 100, 100)
	with pytest.raises(SystemExit) as excinfo:
		sheet_imposer.cli.main([str(front), "-W", "90", "-H", "50", "--spacing", "-90", "--plan-only"])
	assert excinfo.value.code == 2
	assert "Error:" in capsys.readouterr().out


#============================================
def test_sheet_size_is_case_insensitive(make_image_file) -> None:
	"""
	Ensure lower-case sheet names are accepted.
	"""
	front = make_image_file("front.png", 100, 100)
	args = sheet_imposer.cli.parse_args([str(front), "-s", "a3"])
	assert args.sheet_name == "A3"
