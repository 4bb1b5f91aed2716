import pytest

import sheet_imposer.config
import sheet_imposer.errors
import sheet_imposer.packing


ItemSpec = sheet_imposer.config.ItemSpec
SheetSize = sheet_imposer.config.SheetSize
pack_grid = sheet_imposer.packing.pack_grid
get_sheet_size = sheet_imposer.packing.get_sheet_size
EPSILON = 0.0001


#============================================
def brute_force_best(item: ItemSpec, sheet: SheetSize) -> int:
	"""
	Find the best items-per-sheet count by trying every grid up to 100x100.

	Args:
		item: Item spec.
		sheet: Sheet size.

	Returns:
		Largest feasible cols * rows, 0 when nothing fits.
	"""
	width = item.effective_width_mm
	height = item.effective_height_mm
	best = 0
	for cols in range(1, 101):
		for rows in range(1, 101):
			total_width = cols * width + (cols - 1) * item.spacing_mm
			total_height = rows * height + (rows - 1) * item.spacing_mm
			if total_width <= sheet.width_mm and total_height <= sheet.height_mm:
				best = max(best, cols * rows)
	return best


#============================================
@pytest.mark.parametrize(
	"item, sheet_name",
	[
		(ItemSpec(90.0, 50.0, 1.0, 0.0), "A4"),
		(ItemSpec(90.0, 50.0, 1.0, 0.0), "A3"),
		(ItemSpec(90.0, 50.0, 1.0, 3.0), "A3"),
		(ItemSpec(100.0, 70.0, 2.0, 0.0), "A2"),
		(ItemSpec(33.0, 47.0, 0.0, 0.0), "A4"),
		(ItemSpec(290.0, 10.0, 1.0, 0.0), "A3"),
		(ItemSpec(210.0, 297.0, 1.0, 0.0), "A4"),
	],
)
def test_packer_matches_brute_force(item: ItemSpec, sheet_name: str) -> None:
	"""
	Ensure the packer finds the same maximum as brute force and fits the sheet.
	"""
	sheet = get_sheet_size(sheet_name)
	layout = pack_grid(item, sheet)
	assert not layout.oversized
	assert layout.items_per_sheet == layout.cols * layout.rows
	assert layout.items_per_sheet == brute_force_best(item, sheet)
	total_width = layout.cols * layout.item_width_mm + (layout.cols - 1) * layout.spacing_mm
	total_height = layout.rows * layout.item_height_mm + (layout.rows - 1) * layout.spacing_mm
	assert total_width <= sheet.width_mm
	assert total_height <= sheet.height_mm


#============================================
def test_business_card_on_a4() -> None:
	"""
	Ensure 90x50mm cards with 1mm spacing give a centered 2x5 grid on A4.
	"""
	layout = pack_grid(ItemSpec(90.0, 50.0, 1.0, 0.0), get_sheet_size("A4"))
	assert (layout.cols, layout.rows) == (2, 5)
	assert layout.items_per_sheet == 10
	assert abs(layout.margin_horizontal_mm - 14.5) < EPSILON
	assert abs(layout.margin_vertical_mm - 21.5) < EPSILON
	assert sheet_imposer.packing.compute_total_sheets(layout, 95) == 10


#============================================
def test_business_card_on_a3() -> None:
	"""
	Ensure the general search picks 3x8 on A3 without special cases.
	"""
	layout = pack_grid(ItemSpec(90.0, 50.0, 1.0, 0.0), get_sheet_size("A3"))
	assert (layout.cols, layout.rows) == (3, 8)
	assert abs(layout.margin_horizontal_mm - 12.5) < EPSILON
	assert abs(layout.margin_vertical_mm - 6.5) < EPSILON


#============================================
def test_bleed_grows_footprint() -> None:
	"""
	Ensure bleed is added to both sides of the item before packing.
	"""
	layout = pack_grid(ItemSpec(90.0, 50.0, 1.0, 3.0), get_sheet_size("A4"))
	assert layout.item_width_mm == 96.0
	assert layout.item_height_mm == 56.0
	assert (layout.cols, layout.rows) == (2, 5)
	assert abs(layout.margin_horizontal_mm - 8.5) < EPSILON
	assert abs(layout.margin_vertical_mm - 6.5) < EPSILON


#============================================
def test_pack_grid_is_pure() -> None:
	"""
	Ensure identical inputs give identical layouts with or without the cache.
	"""
	item = ItemSpec(55.0, 85.0, 1.0, 0.0)
	sheet = get_sheet_size("A2")
	first = pack_grid(item, sheet)
	pack_grid.cache_clear()
	second = pack_grid(item, sheet)
	assert first == second


#============================================
def test_margins_non_negative_and_centered() -> None:
	"""
	Ensure margins are non-negative and split the leftover space evenly.
	"""
	for sheet in sheet_imposer.config.SHEET_CATALOG:
		for width, height in ((10.0, 10.0), (90.0, 50.0), (123.4, 56.7), (400.0, 300.0)):
			item = ItemSpec(width, height, 1.0, 0.0)
			layout = pack_grid(item, sheet)
			if layout.oversized:
				continue
			assert layout.margin_horizontal_mm >= 0.0
			assert layout.margin_vertical_mm >= 0.0
			used_width = layout.cols * width + (layout.cols - 1) * 1.0
			used_height = layout.rows * height + (layout.rows - 1) * 1.0
			assert abs(2.0 * layout.margin_horizontal_mm + used_width - sheet.width_mm) < EPSILON
			assert abs(2.0 * layout.margin_vertical_mm + used_height - sheet.height_mm) < EPSILON


#============================================
def test_oversized_item_falls_back() -> None:
	"""
	Ensure an item larger than every sheet gets one item per sheet.
	"""
	item = ItemSpec(2500.0, 2500.0, 1.0, 0.0)
	for sheet in sheet_imposer.config.SHEET_CATALOG:
		layout = pack_grid(item, sheet)
		assert layout.oversized
		assert (layout.cols, layout.rows, layout.items_per_sheet) == (1, 1, 1)
		assert layout.margin_horizontal_mm == 0.0
		assert layout.margin_vertical_mm == 0.0
		assert sheet_imposer.packing.compute_total_sheets(layout, 37) == 37
		assert sheet_imposer.packing.compute_efficiency(layout) == 0.0


#============================================
def test_oversized_on_one_axis_keeps_other_margin() -> None:
	"""
	Ensure an item too wide for the sheet still centers vertically.
	"""
	layout = pack_grid(ItemSpec(220.0, 50.0, 1.0, 0.0), get_sheet_size("A4"))
	assert layout.oversized
	assert layout.margin_horizontal_mm == 0.0
	assert abs(layout.margin_vertical_mm - 123.5) < EPSILON


#============================================
def test_item_exactly_sheet_sized() -> None:
	"""
	Ensure an item the size of the sheet fits once without the fallback.
	"""
	layout = pack_grid(ItemSpec(210.0, 297.0, 1.0, 0.0), get_sheet_size("A4"))
	assert not layout.oversized
	assert layout.items_per_sheet == 1
	assert layout.margin_horizontal_mm == 0.0
	assert layout.margin_vertical_mm == 0.0


#============================================
def test_efficiency_is_area_fraction() -> None:
	"""
	Ensure efficiency is covered item area over sheet area.
	"""
	layout = pack_grid(ItemSpec(90.0, 50.0, 1.0, 0.0), get_sheet_size("A4"))
	expected = (10 * 90.0 * 50.0) / (210.0 * 297.0)
	assert abs(sheet_imposer.packing.compute_efficiency(layout) - expected) < EPSILON


#============================================
def test_orient_sheet() -> None:
	"""
	Ensure sheets turn landscape and back while keeping their name.
	"""
	a3 = get_sheet_size("A3")
	landscape = sheet_imposer.packing.orient_sheet(a3, True)
	assert (landscape.name, landscape.width_mm, landscape.height_mm) == ("A3", 420.0, 297.0)
	assert sheet_imposer.packing.orient_sheet(landscape, False) == a3


#============================================
def test_get_sheet_size_lookup() -> None:
	"""
	Ensure lookups ignore case and reject unknown names.
	"""
	assert get_sheet_size("a2").width_mm == 420.0
	with pytest.raises(sheet_imposer.errors.UnknownSheetSizeError):
		get_sheet_size("B5")
	catalog = sheet_imposer.packing.resolve_catalog(("A4", "A3"))
	with pytest.raises(sheet_imposer.errors.UnknownSheetSizeError):
		get_sheet_size("A0", catalog)


#============================================
def test_resolve_catalog_keeps_size_order() -> None:
	"""
	Ensure resolved catalogs stay ordered smallest to largest.
	"""
	catalog = sheet_imposer.packing.resolve_catalog(("A0", "A4", "A2"))
	assert [sheet.name for sheet in catalog] == ["A4", "A2", "A0"]


#============================================
def test_validate_item_dimensions() -> None:
	"""
	Ensure non-positive and out-of-range sizes are rejected.
	"""
	sheet_imposer.packing.validate_item_dimensions(90.0, 50.0, 10.0, 2000.0)
	for width, height in ((0.0, 50.0), (90.0, -1.0), (5.0, 50.0), (90.0, 2500.0), (None, 50.0)):
		with pytest.raises(sheet_imposer.errors.InvalidDimensionError):
			sheet_imposer.packing.validate_item_dimensions(width, height, 10.0, 2000.0)


#============================================
def test_validate_quantity() -> None:
	"""
	Ensure quantities outside 1 to the ceiling are rejected.
	"""
	sheet_imposer.packing.validate_quantity(1)
	sheet_imposer.packing.validate_quantity(10000)
	for value in (0, -3, 10001, 2.5, True):
		with pytest.raises(sheet_imposer.errors.InvalidQuantityError):
			sheet_imposer.packing.validate_quantity(value)


#============================================
def test_validate_spacing_and_bleed() -> None:
	"""
	Ensure negative spacing or bleed and empty footprints are rejected.
	"""
	sheet_imposer.packing.validate_spacing_and_bleed(90.0, 50.0, 0.0, 0.0)
	sheet_imposer.packing.validate_spacing_and_bleed(90.0, 50.0, 1.0, 3.0)
	for spacing, bleed in ((-1.0, 0.0), (1.0, -0.1), (None, 0.0), (1.0, None)):
		with pytest.raises(sheet_imposer.errors.InvalidDimensionError):
			sheet_imposer.packing.validate_spacing_and_bleed(90.0, 50.0, spacing, bleed)
	with pytest.raises(sheet_imposer.errors.InvalidDimensionError):
		sheet_imposer.packing.validate_spacing_and_bleed(0.0, 50.0, 1.0, 0.0)
